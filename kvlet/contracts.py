"""Core data contracts for kvlet records and notifications."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from .exceptions import ConfigError


class Method(str, Enum):
    """How a notification target is called."""

    GET = "GET"
    POST = "POST"
    NONE = "NONE"

    @property
    def dispatches(self) -> bool:
        return self is not Method.NONE


def parse_method(token: Optional[str]) -> Method:
    """Parse a method token from external input.

    Tokens are case-insensitive. ``None`` and the empty string mean
    ``Method.NONE``; anything else unrecognised raises ``ConfigError``.
    """
    if token is None:
        return Method.NONE
    normalized = token.strip().upper()
    if not normalized:
        return Method.NONE
    try:
        return Method(normalized)
    except ValueError:
        raise ConfigError(f"method not supported: {token!r}") from None


class NotifyTarget(BaseModel):
    """Where state changes for a record are reported."""

    method: Method
    endpoint: str = ""

    @model_validator(mode="after")
    def _require_endpoint(self) -> "NotifyTarget":
        if self.method.dispatches and not self.endpoint.strip():
            raise ValueError(f"{self.method.value} target requires an endpoint")
        return self

    @classmethod
    def build(cls, method: Method, endpoint: str = "") -> "NotifyTarget":
        """Construct a target, raising ``ConfigError`` instead of a validation error."""
        if method.dispatches and not endpoint.strip():
            raise ConfigError(f"{method.value} target requires an endpoint")
        return cls(method=method, endpoint=endpoint)

    @classmethod
    def from_options(
        cls, method: Optional[str], url: Optional[str]
    ) -> Optional["NotifyTarget"]:
        """Build a target from loose ``method``/``url`` options.

        Returns ``None`` when neither is given. A URL without a method
        defaults to GET.
        """
        if method is None and url is None:
            return None
        if method is None:
            return cls.build(Method.GET, url or "")
        parsed = parse_method(method)
        if parsed.dispatches and not url:
            raise ConfigError(f"method {parsed.value} given without a url")
        return cls.build(parsed, url or "")

    @property
    def dispatches(self) -> bool:
        return self.method.dispatches


class RecordWrite(BaseModel):
    """Incoming write for a single record."""

    id: str = Field(min_length=1)
    state: str
    info: Optional[str] = None
    notify_target: Optional[NotifyTarget] = None


class Outcome(BaseModel):
    """Result of one notification call."""

    status_code: int = Field(ge=0, le=65535)
    body: str = ""


class Record(BaseModel):
    """Persisted record state."""

    id: str
    state: str
    info: Optional[str] = None
    notify_target: Optional[NotifyTarget] = None
    last_response: Optional[Outcome] = None
    created_at: int
    updated_at: int

    @property
    def created(self) -> datetime:
        return datetime.fromtimestamp(self.created_at / 1000)

    @property
    def updated(self) -> datetime:
        return datetime.fromtimestamp(self.updated_at / 1000)
