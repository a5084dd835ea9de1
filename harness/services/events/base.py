from typing import List

from harness.schemas.events import Notification, StoredEvent


class EventStore:
    """append-only store of verified notifications."""

    def append(self, notification: Notification) -> StoredEvent:  # pragma: no cover
        """persist one notification; raises StoreWriteError on failure."""
        raise NotImplementedError

    def list_all(self) -> List[StoredEvent]:  # pragma: no cover
        """every stored notification, most recently appended first."""
        raise NotImplementedError
