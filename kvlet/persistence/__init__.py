"""Persistence layer for kvlet records."""

from __future__ import annotations

from typing import Optional

from ..config import KvletConfig
from ..exceptions import ConfigError
from .inmemory import InMemoryRecordStore
from .reconcile import reconcile_record, reconcile_text, reconcile_value
from .repository import Clock, RecordRepository, now_millis
from .sqlite import SQLiteRecordStore


def get_store(config: KvletConfig, clock: Optional[Clock] = None) -> RecordRepository:
    """Factory function to obtain the record store selected by ``config``."""

    if config.backend == "sqlite":
        return SQLiteRecordStore(config.db_path, clock=clock)
    if config.backend == "inmemory":
        return InMemoryRecordStore(clock=clock)
    raise ConfigError(f"Unsupported store backend: {config.backend}")


__all__ = [
    "Clock",
    "InMemoryRecordStore",
    "RecordRepository",
    "SQLiteRecordStore",
    "get_store",
    "now_millis",
    "reconcile_record",
    "reconcile_text",
    "reconcile_value",
]
