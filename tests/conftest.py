"""Shared fixtures for kvlet tests."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
import requests

from kvlet.persistence import InMemoryRecordStore, SQLiteRecordStore


class Tick:
    """Deterministic clock advancing one millisecond per call."""

    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


class FakeSession:
    """Records requests and answers with a canned status and body."""

    def __init__(self, status_code: int = 200, text: str = "ok", error=None) -> None:
        self.status_code = status_code
        self.text = text
        self.error = error
        self.calls: list[dict] = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(status_code=self.status_code, text=self.text)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock() -> Tick:
    return Tick()


@pytest.fixture(params=["sqlite", "inmemory"])
def store(request, tmp_path, clock):
    if request.param == "sqlite":
        return SQLiteRecordStore(tmp_path / "kvlet.db", clock=clock)
    return InMemoryRecordStore(clock=clock)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def unreachable_session() -> FakeSession:
    return FakeSession(error=requests.ConnectionError("connection refused"))


@pytest.fixture
def make_session():
    return FakeSession
