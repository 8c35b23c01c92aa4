"""Repository abstraction for record persistence."""

from __future__ import annotations

import time
from typing import Callable, Optional, Protocol

from ..contracts import NotifyTarget, Record, RecordWrite

Clock = Callable[[], int]


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


class RecordRepository(Protocol):
    """Protocol for record persistence backends."""

    def lookup(self, record_id: str) -> Record | None:
        """Return the stored record, or ``None`` when no row matches."""

    def reconcile_write(self, write: RecordWrite) -> Record:
        """Create the record or merge ``write`` into the stored one."""

    def record_outcome(self, record_id: str, status_code: int, body: str) -> None:
        """Overwrite the last notification response of an existing record."""

    def update_target(
        self, record_id: str, target: NotifyTarget
    ) -> Record | None:
        """Replace the stored notification target of an existing record."""

    def list(self, limit: int, state: Optional[str] = None) -> list[Record]:
        """Return up to ``limit`` records, newest first."""
