"""In-memory implementation of the record repository."""

from __future__ import annotations

import itertools
from typing import Dict, Optional

from ..contracts import NotifyTarget, Outcome, Record, RecordWrite
from ..exceptions import ConfigError, StorageError
from .reconcile import reconcile_record
from .repository import Clock, RecordRepository, now_millis


class InMemoryRecordStore(RecordRepository):
    """Store records in local memory.

    Useful for tests or dry runs. Data is not persisted across process
    restarts.
    """

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or now_millis
        self._records: Dict[str, Record] = {}
        self._inserted: Dict[str, int] = {}
        self._sequence = itertools.count()

    # ------------------------------------------------------------------
    def lookup(self, record_id: str) -> Record | None:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record else None

    def reconcile_write(self, write: RecordWrite) -> Record:
        existing = self._records.get(write.id)
        record = reconcile_record(write, existing, self._clock())
        if existing is None:
            self._inserted[record.id] = next(self._sequence)
        self._records[record.id] = record
        return record.model_copy(deep=True)

    def record_outcome(self, record_id: str, status_code: int, body: str) -> None:
        record = self._records.get(record_id)
        if record is None:
            raise StorageError(f"cannot record outcome: no record with id {record_id!r}")
        record.last_response = Outcome(status_code=status_code, body=body)
        record.updated_at = max(self._clock(), record.updated_at)

    def update_target(self, record_id: str, target: NotifyTarget) -> Record | None:
        record = self._records.get(record_id)
        if record is None:
            return None
        record.notify_target = target
        record.updated_at = max(self._clock(), record.updated_at)
        return record.model_copy(deep=True)

    def list(self, limit: int, state: Optional[str] = None) -> list[Record]:
        if limit < 0:
            raise ConfigError(f"limit must be non-negative, got {limit}")
        records = [
            r for r in self._records.values() if state is None or r.state == state
        ]
        records.sort(key=lambda r: (r.created_at, self._inserted[r.id]), reverse=True)
        return [r.model_copy(deep=True) for r in records[:limit]]
