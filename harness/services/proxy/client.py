import json
import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from harness.core.credentials import CredentialPair, CredentialTable
from harness.schemas.payments import ProxyResponse

logger = logging.getLogger(__name__)

SECRET = "secret"
PUBLIC = "public"
EXCEPTION_STATUS = "exception"


class CredentialRoutes:
    """static path -> key kind table, e.g. {"/tokens": "public"} with secret as default."""

    def __init__(self, overrides: Optional[Dict[str, str]] = None, default: str = SECRET):
        for kind in [default, *(overrides or {}).values()]:
            if kind not in (SECRET, PUBLIC):
                raise ValueError(f"Unknown key kind: {kind!r}")
        self.overrides = dict(overrides or {})
        self.default = default

    @classmethod
    def public_for(cls, paths: Iterable[str]) -> "CredentialRoutes":
        return cls({p: PUBLIC for p in paths})

    def kind_for(self, path: str) -> str:
        return self.overrides.get(path, self.default)

    def select(self, pair: CredentialPair, path: str) -> str:
        return pair.public_key if self.kind_for(path) == PUBLIC else pair.secret_key


class ApiProxy:
    """
    Relays browser-built requests to the provider REST API.

    Upstream 4xx/5xx are relayed as-is; only transport failures are turned
    into an "exception" status so the browser always gets an answer.
    """

    def __init__(
        self,
        credentials: CredentialTable,
        routes: CredentialRoutes,
        default_tenant: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.credentials = credentials
        self.routes = routes
        self.default_tenant = default_tenant
        self.timeout = timeout
        self.transport = transport

    def build_request(
        self, client: httpx.Client, domain: str, path: str, verb: str, body: Any = None, tenant: Optional[str] = None
    ) -> httpx.Request:
        """raises ConfigurationError for an unknown tenant."""
        pair = self.credentials.get(tenant or self.default_tenant)
        method = verb.upper()
        headers = {
            "Authorization": self.routes.select(pair, path),
            "Content-Type": "application/json",
        }
        content = None
        if method != "GET" and body is not None:
            content = json.dumps(body).encode("utf-8")
        # built through the client so its timeout applies
        return client.build_request(method, f"{domain}{path}", headers=headers, content=content)

    def forward(self, domain: str, path: str, verb: str, body: Any = None, tenant: Optional[str] = None) -> ProxyResponse:
        url = f"{domain}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                request = self.build_request(client, domain, path, verb, body, tenant)
                response = client.send(request)
                payload = _relay_body(response)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # JSONDecodeError is a ValueError: declared JSON that isn't
            logger.error(f"status: exception calling {verb} {url}: {e!r}")
            return ProxyResponse(status=EXCEPTION_STATUS, statusText=type(e).__name__, body=str(e))

        logger.info(f"{verb.upper()} {url} -> {response.status_code}")
        return ProxyResponse(status=response.status_code, statusText=response.reason_phrase, body=payload)


def _relay_body(response: httpx.Response) -> Any:
    """parsed JSON if the upstream declares a JSON content-type and sends a body, else {}."""
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type and response.content:
        return response.json()
    return {}
