"""Unit tests for logging configuration."""

import logging

import pytest

from src.infrastructure.logging import (
    HTTP_LOGGERS,
    CorrelationIDFilter,
    configure_logging,
    get_correlation_id,
    set_correlation_id,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_http_loggers_are_quiet_by_default():
    configure_logging(logging.INFO)

    assert logging.getLogger().level == logging.INFO
    for name in HTTP_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_verbose_enables_debug_and_http_logs():
    configure_logging(logging.INFO, verbose=True)

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.INFO


def test_filter_adds_current_correlation_id():
    set_correlation_id("run-123")
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "message", None, None)

    assert CorrelationIDFilter().filter(record) is True
    assert record.correlation_id == "run-123"
    assert get_correlation_id() == "run-123"
