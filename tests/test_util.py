"""Tests for coercion helpers, the error taxonomy, settings and logging bootstrap."""

from __future__ import annotations

import logging

import pytest

from config.settings import Settings
from util import functions
from util.errors import (
    AppError,
    AuthenticationError,
    NotFoundError,
    NotReadyError,
    RequestFailedError,
    TimeoutExceededError,
    error_for_status,
)


# ---------------------------------------------------------------------------
# coercion
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("value", ["1", "true", "True", " yes ", True, 1, 2.5, ["x"]])
def test_to_bool_truthy(value):
    assert functions.to_bool(value) is True


@pytest.mark.parametrize("value", [None, "0", "false", "", False, 0, []])
def test_to_bool_falsy(value):
    assert functions.to_bool(value) is False


def test_to_int_and_float():
    assert functions.to_int("42") == 42
    assert functions.to_int("4.9") == 4
    assert functions.to_int("n/a", default=-1) == -1
    assert functions.to_int(None) == 0
    assert functions.to_float("0.25") == 0.25
    assert functions.to_float(["1"]) == 0.0


def test_to_str_and_list():
    assert functions.to_str(None) is None
    assert functions.to_str(True) == "1"
    assert functions.to_str(["a", "b"]) == "a,b"
    assert functions.to_list(None) == []
    assert functions.to_list("power") == ["power"]
    assert functions.to_list(["power", "user"]) == ["power", "user"]


def test_join_path_quotes_names():
    assert functions.join_path("authentication/users", "a b/c") == "authentication/users/a%20b%2Fc"
    assert functions.join_path("search/jobs/", "1760745600.1") == "search/jobs/1760745600.1"


# ---------------------------------------------------------------------------
# errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "status, kind",
    [(401, AuthenticationError), (404, NotFoundError), (400, RequestFailedError), (500, RequestFailedError)],
)
def test_error_for_status(status, kind):
    err = error_for_status(status, "boom")
    assert isinstance(err, kind)
    assert isinstance(err, AppError)
    assert err.status == status
    assert err.message == "boom"


def test_error_defaults():
    assert AuthenticationError().status == 401
    assert NotReadyError().status == 204
    assert "HTTP 418" in RequestFailedError(418).message


def test_timeout_is_builtin_timeout():
    err = TimeoutExceededError("too slow")
    assert isinstance(err, TimeoutError)
    assert isinstance(err, AppError)
    assert str(err) == "too slow"


# ---------------------------------------------------------------------------
# settings / logging
# ---------------------------------------------------------------------------


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SPLUNK_HOST", "splunk.example.com")
    monkeypatch.setenv("SPLUNK_PORT", "18089")
    monkeypatch.setenv("RESTART_TIMEOUT_SECONDS", "30")
    s = Settings()
    assert s.SPLUNK_HOST == "splunk.example.com"
    assert s.SPLUNK_PORT == 18089
    assert s.RESTART_TIMEOUT_SECONDS == 30.0


def test_settings_reject_bad_drain_share(monkeypatch):
    monkeypatch.setenv("RESTART_DRAIN_SHARE", "1.5")
    with pytest.raises(ValueError):
        Settings()


def test_init_logger_is_idempotent(fresh_root_logger):
    from util.logger import init_logger

    first = init_logger()
    count = len(fresh_root_logger.handlers)
    second = init_logger()
    assert first is second
    assert len(fresh_root_logger.handlers) == count
    assert logging.getLogger("httpx").level == logging.WARNING


def test_init_logger_level_override(fresh_root_logger):
    from util.logger import init_logger

    init_logger("debug")
    assert fresh_root_logger.level == logging.DEBUG
