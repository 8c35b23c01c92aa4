"""Repository contract tests, run against every store backend."""

import pytest

from kvlet.contracts import Method, NotifyTarget, Outcome, RecordWrite
from kvlet.exceptions import ConfigError, StorageError

TARGET = NotifyTarget(method=Method.POST, endpoint="http://x/cb")


def test_lookup_missing_returns_none(store):
    assert store.lookup("nope") is None


def test_create_then_lookup(store):
    created = store.reconcile_write(RecordWrite(id="k1", state="running"))
    found = store.lookup("k1")

    assert found == created
    assert found.state == "running"
    assert found.notify_target is None
    assert found.last_response is None
    assert found.created_at == found.updated_at


def test_update_merges_into_existing_row(store):
    store.reconcile_write(RecordWrite(id="k2", state="running", info="i", notify_target=TARGET))
    updated = store.reconcile_write(RecordWrite(id="k2", state="done"))

    assert updated.state == "done"
    assert updated.info == "i"
    assert updated.notify_target == TARGET
    assert store.lookup("k2") == updated


def test_repeated_write_keeps_one_row_and_created_at(store):
    first = store.reconcile_write(RecordWrite(id="k4", state="s"))
    second = store.reconcile_write(RecordWrite(id="k4", state="s"))

    assert [r.id for r in store.list(10)] == ["k4"]
    assert second.created_at == first.created_at
    assert second.updated_at > first.updated_at


def test_record_outcome_sets_last_response(store):
    written = store.reconcile_write(RecordWrite(id="k7", state="s", notify_target=TARGET))
    store.record_outcome("k7", 201, "created")

    found = store.lookup("k7")
    assert found.last_response == Outcome(status_code=201, body="created")
    assert found.updated_at > written.updated_at
    assert found.notify_target == TARGET


def test_record_outcome_overwrites_previous_response(store):
    store.reconcile_write(RecordWrite(id="k", state="s"))
    store.record_outcome("k", 500, "boom")
    store.record_outcome("k", 200, "ok")
    assert store.lookup("k").last_response == Outcome(status_code=200, body="ok")


def test_record_outcome_for_missing_record_fails(store):
    with pytest.raises(StorageError):
        store.record_outcome("ghost", 200, "ok")


def test_update_target_on_existing_record(store):
    store.reconcile_write(RecordWrite(id="k", state="s"))
    updated = store.update_target("k", TARGET)

    assert updated.notify_target == TARGET
    assert updated.state == "s"
    assert store.lookup("k").notify_target == TARGET


def test_update_target_on_missing_record_returns_none(store):
    assert store.update_target("ghost", TARGET) is None
    assert store.lookup("ghost") is None


def test_list_newest_first_with_limit(store):
    store.reconcile_write(RecordWrite(id="k5", state="running"))
    store.reconcile_write(RecordWrite(id="k6", state="running"))

    assert [r.id for r in store.list(1)] == ["k6"]
    assert [r.id for r in store.list(10)] == ["k6", "k5"]


def test_list_orders_by_creation_not_update(store):
    store.reconcile_write(RecordWrite(id="a", state="s"))
    store.reconcile_write(RecordWrite(id="b", state="s"))
    store.reconcile_write(RecordWrite(id="a", state="t"))

    assert [r.id for r in store.list(10)] == ["b", "a"]


def test_list_filters_by_exact_state(store):
    store.reconcile_write(RecordWrite(id="x", state="done"))
    store.reconcile_write(RecordWrite(id="y", state="running"))
    store.reconcile_write(RecordWrite(id="z", state="Done"))

    assert [r.id for r in store.list(10, state="done")] == ["x"]
    assert store.list(10, state="missing") == []


def test_list_rejects_negative_limit(store):
    with pytest.raises(ConfigError):
        store.list(-1)
