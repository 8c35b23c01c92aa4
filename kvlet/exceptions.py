"""Exception hierarchy for kvlet."""

from __future__ import annotations


class KvletError(Exception):
    """Base exception for all kvlet errors."""


class ConfigError(KvletError):
    """Invalid configuration or malformed notification target."""


class StorageError(KvletError):
    """Database unreachable, schema mismatch or constraint violation."""


class DispatchError(KvletError):
    """Transport-level failure while reaching a notification endpoint."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
