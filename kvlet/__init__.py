"""kvlet: durable key-value records with state-change notifications."""

from .config import KvletConfig, load_config
from .contracts import Method, NotifyTarget, Outcome, Record, RecordWrite, parse_method
from .dispatch import NotificationDispatcher
from .exceptions import ConfigError, DispatchError, KvletError, StorageError
from .orchestrator import RecordOrchestrator
from .persistence import InMemoryRecordStore, SQLiteRecordStore, get_store

__version__ = "0.1.0"
__all__ = [
    "ConfigError",
    "DispatchError",
    "InMemoryRecordStore",
    "KvletConfig",
    "KvletError",
    "Method",
    "NotificationDispatcher",
    "NotifyTarget",
    "Outcome",
    "Record",
    "RecordOrchestrator",
    "RecordWrite",
    "SQLiteRecordStore",
    "StorageError",
    "get_store",
    "load_config",
    "parse_method",
]
