import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from harness.core.credentials import CredentialTable
from harness.core.errors import ConfigurationError
from harness.schemas.events import Notification, StoredEvent
from harness.services.events.base import EventStore
from .signature import SIGNATURE_HEADER, verify

logger = logging.getLogger(__name__)


class IngestOutcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class IngestResult:
    outcome: IngestOutcome
    event: Optional[StoredEvent] = None
    reason: Optional[str] = None  # for logs only, never sent back to the caller

    @property
    def accepted(self) -> bool:
        return self.outcome is IngestOutcome.ACCEPTED


class NotificationListener:
    """verifies inbound provider notifications and stores the genuine ones."""

    def __init__(self, credentials: CredentialTable, store: EventStore):
        self.credentials = credentials
        self.store = store

    def receive(self, tenant: str, path: str, headers: Mapping[str, str], raw_body: bytes) -> IngestResult:
        """
        Pending -> Accepted | Rejected.

        Exactly one store write per accepted notification, none otherwise.
        StoreWriteError from the store propagates to the caller. Replays are
        stored again.
        """
        logger.info(f"received {tenant} event notification on {path}")

        try:
            secret = self.credentials.get(tenant).secret_key
        except ConfigurationError as e:
            logger.warning(f"rejecting notification: {e}")
            return IngestResult(IngestOutcome.REJECTED, reason="unknown_tenant")

        signature = _header(headers, SIGNATURE_HEADER)
        if not verify(secret.encode(), raw_body, signature):
            logger.info("signature mismatch...")
            return IngestResult(IngestOutcome.REJECTED, reason="signature_mismatch")

        logger.info("signature match...")
        notification = Notification(path=path, headers=dict(headers), body=_decode_body(raw_body))
        event = self.store.append(notification)
        logger.info(f"wrote event {event.id} to store")
        return IngestResult(IngestOutcome.ACCEPTED, event=event)


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    # starlette headers are case-insensitive already, plain dicts are not
    value = headers.get(name)
    if value is not None:
        return value
    for key, val in headers.items():
        if key.lower() == name:
            return val
    return None


def _decode_body(raw_body: bytes) -> Any:
    """parsed JSON when possible, otherwise the body as text."""
    text = raw_body.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        return text
