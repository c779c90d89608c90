"""Structured Logging — JSON formatter and setup tests."""

import json
import logging

from rpcgate.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "rpcgate.services.rpc_router", logging.WARNING, __file__, 1,
        "Procedure '%s' failed", ("example.hello",), None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_dispatch_fields():
    payload = json.loads(JSONFormatter().format(_record(
        procedure="example.hello", request_id="r1",
        error_code="BAD_INPUT", duration_ms=1.5,
    )))
    assert payload["message"] == "Procedure 'example.hello' failed"
    assert payload["level"] == "WARNING"
    assert payload["procedure"] == "example.hello"
    assert payload["request_id"] == "r1"
    assert payload["error_code"] == "BAD_INPUT"
    assert payload["duration_ms"] == 1.5


def test_json_formatter_omits_missing_fields():
    payload = json.loads(JSONFormatter().format(_record(error_code=None)))
    assert "error_code" not in payload
    assert "procedure" not in payload


def test_setup_logging_does_not_stack_handlers():
    before = list(logging.root.handlers)
    level = logging.root.level
    try:
        setup_logging("DEBUG", "json")
        setup_logging("INFO", "text")
        added = [h for h in logging.root.handlers if h not in before]
        assert len(added) == 1
        assert logging.root.level == logging.INFO
    finally:
        for handler in logging.root.handlers[:]:
            if handler not in before:
                logging.root.removeHandler(handler)
        logging.root.setLevel(level)
