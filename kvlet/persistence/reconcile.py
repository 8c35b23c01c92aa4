"""Write-time reconciliation of incoming values against stored records.

These helpers are pure: they never touch storage, so every backend applies
exactly the same merge rules.
"""

from __future__ import annotations

from typing import Optional, TypeVar

from ..contracts import Record, RecordWrite

T = TypeVar("T")


def reconcile_value(new: Optional[T], previous: Optional[T]) -> Optional[T]:
    """Return ``new`` when it is present, otherwise keep ``previous``."""
    return previous if new is None else new


def reconcile_text(new: Optional[str], previous: Optional[str]) -> Optional[str]:
    """Like :func:`reconcile_value` but an empty string counts as absent."""
    return reconcile_value(new or None, previous)


def reconcile_record(write: RecordWrite, existing: Record | None, now: int) -> Record:
    """Compute the record to persist for ``write``.

    Without an ``existing`` record a fresh one is created with both
    timestamps set to ``now``. Otherwise ``state`` is always replaced,
    ``info`` and ``notify_target`` are only replaced when supplied, the
    last response and ``created_at`` are carried over, and ``updated_at``
    never moves backwards.
    """
    if existing is None:
        return Record(
            id=write.id,
            state=write.state,
            info=write.info or None,
            notify_target=write.notify_target,
            last_response=None,
            created_at=now,
            updated_at=now,
        )

    return Record(
        id=existing.id,
        state=write.state,
        info=reconcile_text(write.info, existing.info),
        notify_target=reconcile_value(write.notify_target, existing.notify_target),
        last_response=existing.last_response,
        created_at=existing.created_at,
        updated_at=max(now, existing.updated_at),
    )
