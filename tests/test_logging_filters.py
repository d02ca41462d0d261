"""Tests for sensitive data filtering and JSON formatting in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from throttle.core.config import LogSettings
from throttle.core.logging import (
    JsonFormatter,
    SensitiveDataFilter,
    clear_request_id,
    configure_logging,
    set_request_id,
)


@pytest.fixture
def capture():
    """Return (logger, stream) wired with redaction and JSON formatting."""

    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    yield logger, stream
    logger.handlers.clear()


def test_sensitive_filter_redacts_api_keys(capture):
    logger, stream = capture

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "x-api-key": "another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_client_identity(capture):
    logger, stream = capture

    logger.info(
        "throttle.blocked",
        extra={"identity": "203.0.113.7", "client_ip": "203.0.113.7", "identity_hash": "abc123"},
    )

    output = stream.getvalue()
    assert "203.0.113.7" not in output
    assert "abc123" in output


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {"X-API-Key": "secret-key", "user-agent": "pytest"},
            "safe_data": {"count": 5},
        },
    )

    output = stream.getvalue()
    assert "secret-key" not in output
    assert "pytest" in output


def test_json_formatter_includes_request_id_from_context(capture):
    logger, stream = capture

    set_request_id("req-ctx-1")
    try:
        logger.info("throttle.allowed", extra={"limit": 3})
    finally:
        clear_request_id()

    payload = json.loads(stream.getvalue())
    assert payload["message"] == "throttle.allowed"
    assert payload["level"] == "info"
    assert payload["request_id"] == "req-ctx-1"
    assert payload["limit"] == 3


def test_configure_logging_writes_to_file(tmp_path):
    root = logging.getLogger()
    previous_handlers = list(root.handlers)
    previous_level = root.level
    log_file = tmp_path / "logs" / "app.log"

    try:
        configure_logging(
            LogSettings(output="file", file_path=str(log_file), max_bytes=1024, level="DEBUG")
        )
        logging.getLogger("throttle.test").info("file_event", extra={"token": "t0k3n"})
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = previous_handlers
        root.setLevel(previous_level)

    content = log_file.read_text(encoding="utf-8")
    assert "file_event" in content
    assert "t0k3n" not in content
