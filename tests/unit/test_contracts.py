"""Tests for record and notification contracts."""

import pytest
from pydantic import ValidationError

from kvlet.contracts import Method, NotifyTarget, Outcome, RecordWrite, parse_method
from kvlet.exceptions import ConfigError


@pytest.mark.parametrize(
    "token, expected",
    [
        ("get", Method.GET),
        ("GET", Method.GET),
        ("Post", Method.POST),
        ("none", Method.NONE),
        ("", Method.NONE),
        (None, Method.NONE),
    ],
)
def test_parse_method_accepts_known_tokens(token, expected):
    assert parse_method(token) is expected


def test_parse_method_rejects_unknown_token():
    with pytest.raises(ConfigError, match="put"):
        parse_method("put")


def test_from_options_without_method_or_url_is_absent():
    assert NotifyTarget.from_options(None, None) is None


def test_from_options_url_defaults_to_get():
    target = NotifyTarget.from_options(None, "http://x/cb")
    assert target == NotifyTarget(method=Method.GET, endpoint="http://x/cb")


def test_from_options_method_without_url_fails():
    with pytest.raises(ConfigError):
        NotifyTarget.from_options("post", None)


def test_from_options_none_method_needs_no_url():
    target = NotifyTarget.from_options("none", None)
    assert target is not None
    assert target.method is Method.NONE
    assert not target.dispatches


def test_build_rejects_blank_endpoint_for_dispatching_method():
    with pytest.raises(ConfigError):
        NotifyTarget.build(Method.POST, "  ")


def test_direct_construction_validates_endpoint():
    with pytest.raises(ValidationError):
        NotifyTarget(method=Method.GET, endpoint="")


def test_outcome_status_code_is_unsigned_16_bit():
    assert Outcome(status_code=65535, body="").status_code == 65535
    with pytest.raises(ValidationError):
        Outcome(status_code=70000, body="")
    with pytest.raises(ValidationError):
        Outcome(status_code=-1, body="")


def test_record_write_requires_id():
    with pytest.raises(ValidationError):
        RecordWrite(id="", state="running")
