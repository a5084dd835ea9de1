import logging
from typing import Callable, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from harness.core.errors import StoreWriteError
from harness.models import Event
from harness.schemas.events import Notification, StoredEvent
from .base import EventStore

logger = logging.getLogger(__name__)


class SqlEventStore(EventStore):
    """one row per notification, listed by descending row id."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def append(self, notification: Notification) -> StoredEvent:
        db = self._session_factory()
        try:
            event = Event(document=notification.model_dump(mode="json"))
            db.add(event)
            db.commit()
            db.refresh(event)
            return _to_stored(event)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to write event to database: {e}")
            raise StoreWriteError("database write failed", cause=e) from e
        finally:
            db.close()

    def list_all(self) -> List[StoredEvent]:
        db = self._session_factory()
        try:
            rows = db.scalars(select(Event).order_by(Event.id.desc())).all()
            return [_to_stored(row) for row in rows]
        finally:
            db.close()


def _to_stored(event: Event) -> StoredEvent:
    return StoredEvent(id=event.id, received_at=event.received_at, **event.document)
