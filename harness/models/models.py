from datetime import datetime, timezone
from sqlalchemy import Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from harness.db.base import Base


# helpers
def now() -> datetime:
    return datetime.now(tz=timezone.utc)


class Event(Base):
    """one verified webhook notification, stored as an opaque document."""

    __tablename__ = "events"

    # autoincrement id doubles as the insertion order for listing
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    received_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now)
    document: Mapped[dict] = mapped_column(JSON)
