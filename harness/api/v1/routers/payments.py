from typing import List

from fastapi import APIRouter, Depends, HTTPException

from harness.api.deps import get_credentials, get_proxy
from harness.core.credentials import CredentialTable
from harness.core.errors import ConfigurationError
from harness.schemas.payments import KeyOut, ProxyRequest, ProxyResponse
from harness.services.proxy import ApiProxy

router = APIRouter(tags=["payments"])


@router.post("/fetch-api-request", response_model=ProxyResponse)
def fetch_api_request(payload: ProxyRequest, proxy: ApiProxy = Depends(get_proxy)):
    """
    Invoke the provider REST API on behalf of the browser.

    Always 200: upstream status/statusText/body are relayed inside the
    response, transport failures come back with status "exception".
    """
    try:
        return proxy.forward(
            domain=payload.domain,
            path=payload.path,
            verb=payload.verb,
            body=payload.body,
            tenant=payload.tenant,
        )
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/keys", response_model=List[KeyOut])
def list_keys(credentials: CredentialTable = Depends(get_credentials)):
    # public keys only, secrets never leave the server
    return [KeyOut(structure_id=p.structure_id, public_key=p.public_key) for p in credentials]
