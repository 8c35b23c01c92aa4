"""Sequencing of record writes and state-change notifications."""

from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from .config import KvletConfig
from .contracts import NotifyTarget, Outcome, Record, RecordWrite
from .dispatch import HttpSession, NotificationDispatcher
from .exceptions import ConfigError
from .persistence import RecordRepository, get_store

logger = logging.getLogger(__name__)


class RecordOrchestrator:
    """Entry points combining the record store and the dispatcher.

    Errors from either collaborator propagate unchanged. Nothing is retried:
    a failed dispatch leaves the written record without a fresh
    ``last_response``, and a failed outcome write after a successful
    dispatch loses that outcome.
    """

    def __init__(
        self, store: RecordRepository, dispatcher: NotificationDispatcher
    ) -> None:
        self.store = store
        self.dispatcher = dispatcher

    @classmethod
    def from_config(
        cls, config: KvletConfig, session: Optional[HttpSession] = None
    ) -> "RecordOrchestrator":
        return cls(
            get_store(config),
            NotificationDispatcher(session=session, timeout=config.request_timeout),
        )

    def close(self) -> None:
        """Release the dispatcher's HTTP session."""
        self.dispatcher.close()

    def __enter__(self) -> "RecordOrchestrator":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def set(
        self,
        record_id: str,
        state: str,
        info: Optional[str] = None,
        notify_target: Optional[NotifyTarget] = None,
    ) -> Outcome | None:
        """Write ``state`` for ``record_id`` and notify its target, if any.

        Returns the notification outcome, or ``None`` when the record has
        no target that dispatches.
        """
        try:
            write = RecordWrite(
                id=record_id, state=state, info=info, notify_target=notify_target
            )
        except ValidationError as exc:
            raise ConfigError(f"Invalid write for {record_id!r}: {exc}") from exc
        resolved = self.store.reconcile_write(write)

        target = resolved.notify_target
        if target is None or not target.dispatches:
            return None

        outcome = self.dispatcher.dispatch(
            resolved.id, resolved.state, resolved.info, target
        )
        if outcome is None:
            return None
        self.store.record_outcome(resolved.id, outcome.status_code, outcome.body)
        return outcome

    def get(
        self, record_id: str, notify_target: Optional[NotifyTarget] = None
    ) -> Record | None:
        """Look up ``record_id``.

        A supplied ``notify_target`` replaces the stored one for future
        writes. Reads never dispatch.
        """
        if notify_target is None:
            return self.store.lookup(record_id)
        record = self.store.update_target(record_id, notify_target)
        if record is not None:
            logger.info(
                f"Notification target of {record_id} set to "
                f"{notify_target.method.value} {notify_target.endpoint}"
            )
        return record

    def list(self, limit: int = 10, state: Optional[str] = None) -> list[Record]:
        """Return up to ``limit`` records, newest first, optionally by state."""
        return self.store.list(limit, state)
