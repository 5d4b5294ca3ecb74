"""Filesystem NDJSON event sink.

Events are appended to ``<logs_dir>/events.ndjson``, one JSON line per
event, written with ``json.dumps(sort_keys=True)``.  Each append holds an
exclusive ``fcntl.flock`` on the file; on platforms without ``fcntl``
locking is skipped.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from tabcalc.logging.events import SheetEvent

try:
    import fcntl

    _HAS_FCNTL = True
except ImportError:
    _HAS_FCNTL = False


class EventSink:
    """Append-only NDJSON log writer with file locking."""

    def __init__(self, logs_dir: Path, *, fsync: bool = False) -> None:
        self.logs_dir = logs_dir
        self.path = logs_dir / "events.ndjson"
        self._fsync = fsync
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def write(self, event: SheetEvent) -> None:
        """Append *event* to the log."""
        line = json.dumps(event.model_dump(mode="json"), sort_keys=True, default=str) + "\n"
        self._append(line)

    def read(self, *, level: str | None = None, event_type: str | None = None) -> list[dict[str, Any]]:
        """Read logged events, oldest first, optionally filtered."""
        if not self.path.exists():
            return []
        events: list[dict[str, Any]] = []
        for line in self.path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            try:
                events.append(json.loads(line))
            except json.JSONDecodeError:
                continue
        if level:
            events = [e for e in events if e.get("level") == level]
        if event_type:
            events = [e for e in events if e.get("event_type") == event_type]
        return events

    def _append(self, line: str) -> None:
        if _HAS_FCNTL:
            fd = os.open(str(self.path), os.O_WRONLY | os.O_CREAT | os.O_APPEND)
            try:
                fcntl.flock(fd, fcntl.LOCK_EX)
                os.write(fd, line.encode("utf-8"))
                if self._fsync:
                    os.fsync(fd)
            finally:
                fcntl.flock(fd, fcntl.LOCK_UN)
                os.close(fd)
        else:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line)
                if self._fsync:
                    f.flush()
                    os.fsync(f.fileno())
