"""Tests for stdout logging configuration and context propagation."""

from __future__ import annotations

import json
import logging

import pytest

from packages.warden_shared.config import LoggingSettings
from packages.warden_shared.logging import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    log_context,
)


@pytest.fixture(autouse=True)
def _reset_context():
    clear_context()
    yield
    clear_context()


def _record(message: str = "hello") -> logging.LogRecord:
    record = logging.LogRecord(
        name="warden.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
    ContextFilter().filter(record)
    return record


def test_bind_context_stringifies_and_skips_none() -> None:
    bind_context(policy_id=7, service=None, action="create")

    assert get_context() == {"policy_id": "7", "action": "create"}


def test_log_context_restores_previous_values() -> None:
    bind_context(service="warden")

    with log_context({"field": "resources", "service": "override"}):
        assert get_context() == {"service": "override", "field": "resources"}

    assert get_context() == {"service": "warden"}


def test_clear_context_removes_selected_keys() -> None:
    bind_context(a="1", b="2")

    clear_context("a")

    assert get_context() == {"b": "2"}


def test_json_formatter_includes_bound_context() -> None:
    with log_context({"event": "validation_failure", "field": "name"}):
        record = _record()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "warden.test"
    assert payload["event"] == "validation_failure"
    assert payload["field"] == "name"


def test_plain_formatter_appends_sorted_context() -> None:
    with log_context({"zeta": "z", "alpha": "a"}):
        record = _record()

    line = PlainFormatter().format(record)

    assert line.endswith("warden.test hello alpha=a zeta=z")


def test_configure_logging_replaces_root_handlers_and_seeds_context() -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        configure_logging(LoggingSettings(level="WARNING", json_output=False))
        configure_logging(LoggingSettings(level="DEBUG", environment="test"))

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert get_context() == {"service": "warden", "environment": "test"}
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
