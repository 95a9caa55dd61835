"""Structured logging: normalized lifecycle payloads and the JSON formatter."""

from __future__ import annotations

import json
import logging

from chatwire.base.log_support import JsonFormatter, LogContext
from chatwire.base.logging import (
    REQUIRED_NORMALIZED_KEYS,
    configure_logger,
    get_logger,
    normalized_log_event,
)


def test_normalized_event_carries_required_keys(log_records, logged_events):
    logger = get_logger("chatwire.test")
    ctx = LogContext(provider="anthropic", model="claude", request_id="req-1")
    normalized_log_event(logger, "chat.start", ctx, phase="start", attempt=1)
    (payload,) = logged_events(log_records, "chat.start")
    for key in REQUIRED_NORMALIZED_KEYS:
        if key == "error_code":
            assert key not in payload  # nosec B101
        else:
            assert key in payload  # nosec B101
    assert payload["provider"] == "anthropic" and payload["request_id"] == "req-1"  # nosec B101
    assert payload["structured"] is True and payload["attempt"] == 1  # nosec B101


def test_extra_fields_do_not_override_normalized_values(log_records, logged_events):
    logger = get_logger("test.override")
    normalized_log_event(logger, "x", None, phase="stream", emitted=3, error_code="transport", detail="d")
    (payload,) = logged_events(log_records, "x")
    assert payload["emitted"] == 3 and payload["error_code"] == "transport"  # nosec B101
    assert payload["detail"] == "d"  # nosec B101


def test_child_loggers_live_under_package_logger():
    assert get_logger("pacing").name == "chatwire.pacing"  # nosec B101
    assert get_logger("chatwire.x").name == "chatwire.x"  # nosec B101
    assert get_logger().propagate is False  # nosec B101


def test_json_formatter_hoists_event_fields():
    record = logging.LogRecord("chatwire.t", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 2}), None, None)
    out = json.loads(JsonFormatter().format(record))
    assert out["event"] == "e" and out["n"] == 2 and out["level"] == "INFO"  # nosec B101
    assert "msg" not in out  # nosec B101


def test_json_formatter_plain_message():
    record = logging.LogRecord("chatwire.t", logging.WARNING, __file__, 1, "plain %s", ("text",), None)
    out = json.loads(JsonFormatter().format(record))
    assert out["msg"] == "plain text" and out["logger"] == "chatwire.t"  # nosec B101


def test_configure_logger_attaches_and_removes_file_handler(tmp_path):
    logger = get_logger()
    previous = logger.level
    path = tmp_path / "logs" / "chatwire.log"
    try:
        configure_logger(level="DEBUG", file_path=str(path))
        assert logger.level == logging.DEBUG  # nosec B101
        assert any(getattr(h, "baseFilename", None) == str(path) for h in logger.handlers)  # nosec B101
        configure_logger(file_path=None)
        assert not any(getattr(h, "baseFilename", None) for h in logger.handlers)  # nosec B101
    finally:
        configure_logger(level=previous, file_path=None)
