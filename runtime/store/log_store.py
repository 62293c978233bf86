"""
LogStore: append-only logging for ParkGuard runtime events.

Events are written as JSON lines to:

    <runtime_data_dir>/logs/events_YYYY-MM-DD.jsonl

one file per UTC day. Each line looks like:

    {"timestamp": "...", "event_type": "alert_raised", "payload": {...}}
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


logger = logging.getLogger(__name__)


class LogStore:
    """Date-based JSONL event log.

    The current day's file stays open between events and is swapped when the
    UTC date changes. Call close() on shutdown.
    """

    def __init__(self, log_dir: str = "runtime/data/logs"):
        self.log_dir = Path(log_dir)
        self._handle: Optional[TextIO] = None
        self._handle_day: Optional[str] = None

    def _log_path(self, now: datetime) -> Path:
        return self.log_dir / f"events_{now:%Y-%m-%d}.jsonl"

    def _file_for(self, now: datetime) -> TextIO:
        day = f"{now:%Y-%m-%d}"
        if self._handle is None or self._handle_day != day:
            self.close()
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._handle = self._log_path(now).open("a", encoding="utf-8")
            self._handle_day = day
        return self._handle

    def log_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        """
        Append an event to today's log file.
        """
        now = datetime.now(timezone.utc)
        record = {
            "timestamp": now.isoformat(),
            "event_type": event_type,
            "payload": payload,
        }

        f = self._file_for(now)
        f.write(json.dumps(record, ensure_ascii=False, default=str))
        f.write("\n")
        f.flush()

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
        self._handle = None
        self._handle_day = None


class ConsoleLogStore:
    """Very small log sink used during local development / testing.

    Routes events through the standard logging module instead of a file.
    """

    def log_event(self, event_type: str, payload: Dict[str, Any]) -> None:
        logger.info("[EVENT] %s: %s", event_type, payload)

    def close(self) -> None:
        pass
