from typing import List

from fastapi import APIRouter, Depends

from harness.api.deps import get_store
from harness.schemas.events import StoredEvent
from harness.services.events import EventStore

router = APIRouter(tags=["events"])


@router.post("/fetch-events", response_model=List[StoredEvent])
def fetch_events(store: EventStore = Depends(get_store)):
    """all stored notifications, newest first."""
    return store.list_all()


@router.get("/webhook-notifications", response_model=List[StoredEvent])
def webhook_notifications(store: EventStore = Depends(get_store)):
    return store.list_all()
