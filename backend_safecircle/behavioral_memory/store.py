"""
Memory store: single JSON file mirroring the in-memory MemoryRecord.

Loaded once when the app is built; overwritten after every LOW-risk result.
Best effort throughout: read/write failures are logged and the service keeps
running on the in-memory copy. Single writer (this process), last write wins.
"""

from __future__ import annotations

import json
import threading
from dataclasses import replace
from pathlib import Path

from backend_safecircle.behavioral_memory.models import MemoryRecord
from backend_safecircle.safecircle_logging import get_logger

logger = get_logger(__name__)


class MemoryStore:
    """File-backed holder of the process-wide MemoryRecord."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._record = MemoryRecord()

    def load(self) -> MemoryRecord:
        """
        Read the record from disk and make it current.

        Missing file → default record. Unreadable or malformed content is
        logged and also yields the default; never raises.
        """
        record = MemoryRecord()
        if self.path.exists():
            try:
                parsed = json.loads(self.path.read_text(encoding="utf-8"))
                if isinstance(parsed, dict):
                    record = MemoryRecord.from_dict(parsed)
                else:
                    logger.warning("memory_load_not_object", path=str(self.path))
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.error("memory_load_failed", path=str(self.path), error=str(e))
        with self._lock:
            self._record = record
        logger.info("memory_loaded", path=str(self.path), has_memory=record.hasMemory)
        return replace(record)

    def save(self, record: MemoryRecord | None = None) -> None:
        """Overwrite the file with record (or the current record). Logs on failure; never raises."""
        with self._lock:
            if record is not None:
                self._record = replace(record)
            payload = self._record.to_dict()
            try:
                self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            except (OSError, TypeError, ValueError) as e:
                logger.error("memory_save_failed", path=str(self.path), error=str(e))

    def current(self) -> MemoryRecord:
        with self._lock:
            return replace(self._record)

    def remember_low(self, scenario_id: str | None, safer_action: str | None) -> None:
        """Record a LOW-risk outcome and persist it."""
        record = MemoryRecord(
            hasMemory=True,
            lastLowScenarioId=scenario_id or None,
            lastSaferAction=safer_action or None,
        )
        self.save(record)
        logger.debug("memory_low_recorded", scenario_id=scenario_id)
