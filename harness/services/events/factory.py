from harness.core.config import Settings, settings as default_settings
from harness.core.errors import ConfigurationError
from .base import EventStore
from .file import FileEventStore
from .sql import SqlEventStore


def get_event_store(settings: Settings | None = None) -> EventStore:
    settings = settings or default_settings
    backend = settings.EVENT_STORE
    if backend == "file":
        return FileEventStore(settings.EVENT_LOG_PATH)
    if backend == "database":
        from harness.db.session import SessionLocal
        return SqlEventStore(SessionLocal)
    raise ConfigurationError(f"Unknown EVENT_STORE backend: {backend!r}")
