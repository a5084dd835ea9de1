from datetime import datetime
from typing import Any, Dict, Optional
from pydantic import BaseModel


class Notification(BaseModel):
    """inbound webhook as received; body is whatever JSON the provider sent."""
    path: str
    headers: Dict[str, str]
    body: Any = None


class StoredEvent(Notification):
    id: Optional[int] = None
    received_at: Optional[datetime] = None
