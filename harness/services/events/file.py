import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from pydantic import ValidationError

from harness.core.errors import StoreWriteError
from harness.schemas.events import Notification, StoredEvent
from .base import EventStore

logger = logging.getLogger(__name__)

# shared by every FileEventStore in the process, whatever file it points at
_write_lock = threading.Lock()
# newline count per log file, seeded from disk on first append; guarded by _write_lock
_line_counts: Dict[Path, int] = {}


class FileEventStore(EventStore):
    """
    Append-only JSON-lines log: one UTF-8 line per notification.

    Writes go through a process-wide lock and a single write() call per
    record, so concurrent appends never interleave inside a line. A line
    left unterminated by an interrupted write is closed off before the next
    record and skipped when listing. Listing re-reads the whole file and
    reverses it; the line number (1-based) is the record id.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def append(self, notification: Notification) -> StoredEvent:
        record = {
            "received_at": datetime.now(tz=timezone.utc).isoformat(),
            **notification.model_dump(mode="json"),
        }
        line = (json.dumps(record, ensure_ascii=False) + "\n").encode("utf-8")
        key = self.path.resolve()
        try:
            with _write_lock:
                if key not in _line_counts:
                    _line_counts[key] = _count_newlines(self.path)
                if not _ends_with_newline(self.path):
                    line = b"\n" + line
                with self.path.open("ab") as fh:
                    fh.write(line)
                    fh.flush()
                _line_counts[key] += line.count(b"\n")
                line_no = _line_counts[key]
        except OSError as e:
            logger.error(f"Failed to append event to {self.path}: {e}")
            raise StoreWriteError(f"could not append to {self.path}", cause=e) from e
        return StoredEvent(id=line_no, **record)

    def list_all(self) -> List[StoredEvent]:
        if not self.path.exists():
            return []
        events = []
        with self.path.open("r", encoding="utf-8", errors="replace") as fh:
            for line_no, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                    if not isinstance(data, dict):
                        raise ValueError("record is not a JSON object")
                    events.append(StoredEvent(id=line_no, **data))
                except (ValueError, ValidationError) as e:
                    # torn write or foreign line
                    logger.warning(f"Skipping unreadable line {line_no} in {self.path}: {e}")
        events.reverse()
        return events


def _ends_with_newline(path: Path) -> bool:
    """true for a missing or empty file too."""
    try:
        with path.open("rb") as fh:
            fh.seek(0, os.SEEK_END)
            if fh.tell() == 0:
                return True
            fh.seek(-1, os.SEEK_END)
            return fh.read(1) == b"\n"
    except FileNotFoundError:
        return True


def _count_newlines(path: Path) -> int:
    try:
        with path.open("rb") as fh:
            return sum(chunk.count(b"\n") for chunk in iter(lambda: fh.read(64 * 1024), b""))
    except FileNotFoundError:
        return 0
