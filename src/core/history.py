"""Bounded analysis history (core domain).

History is a newest-first list of records serialized as one JSON document
under a single storage key. Every mutation persists immediately.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable, Optional

from core.models import AnalysisRecord
from core.ports import StoragePort

LOGGER = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "quantum_analysis_history"
DEFAULT_LIMIT = 50


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    """Append/remove operations over a StoragePort."""

    def __init__(
        self,
        storage: StoragePort,
        storage_key: str = DEFAULT_STORAGE_KEY,
        limit: int = DEFAULT_LIMIT,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if limit < 1:
            raise ValueError("history limit must be positive")
        self._storage = storage
        self._key = storage_key
        self._limit = limit
        self._clock = clock
        self._records: Optional[list[AnalysisRecord]] = None
        self._last_id = 0

    @property
    def limit(self) -> int:
        return self._limit

    def load(self) -> list[AnalysisRecord]:
        """Return a copy of the records, newest first."""

        return list(self._ensure_loaded())

    def get(self, record_id: int) -> Optional[AnalysisRecord]:
        for record in self._ensure_loaded():
            if record.id == record_id:
                return record
        return None

    def next_id(self) -> int:
        """Return a millisecond timestamp id, bumped past the last one issued."""

        records = self._ensure_loaded()
        newest = max((record.id for record in records), default=0)
        candidate = self._clock()
        floor = max(self._last_id, newest)
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return candidate

    def append(self, record: AnalysisRecord) -> None:
        """Prepend a record and drop anything beyond the limit."""

        records = self._ensure_loaded()
        records.insert(0, record)
        dropped = len(records) - self._limit
        if dropped > 0:
            del records[self._limit:]
            LOGGER.debug("History trimmed %s old record(s)", dropped)
        self._persist()

    def remove(self, record_id: int) -> bool:
        """Delete a record by id. Unknown ids are a no-op."""

        records = self._ensure_loaded()
        kept = [record for record in records if record.id != record_id]
        if len(kept) == len(records):
            return False
        self._records = kept
        self._persist()
        return True

    def clear(self) -> None:
        self._records = []
        self._persist()

    def _ensure_loaded(self) -> list[AnalysisRecord]:
        if self._records is None:
            self._records = self._read()
        return self._records

    def _read(self) -> list[AnalysisRecord]:
        raw = self._storage.get_value(self._key)
        if not raw:
            return []
        try:
            payload = json.loads(raw)
            if not isinstance(payload, list):
                raise ValueError("history root must be a list")
            records = [AnalysisRecord.from_dict(item) for item in payload]
        except (ValueError, KeyError, TypeError):
            LOGGER.exception("Failed to load history from %s, starting empty", self._key)
            return []
        return records[: self._limit]

    def _persist(self) -> None:
        payload = [record.to_dict() for record in self._records or []]
        self._storage.set_value(self._key, json.dumps(payload, ensure_ascii=True))
