"""Tests for src/logging/audit.py — JSON audit logging."""

import json
import logging

import pytest

from src.logging.audit import (
    JSONFormatter,
    StoreTimer,
    generate_request_id,
    get_audit_logger,
    log_operation,
    log_rejection,
    log_store_failure,
    request_id_var,
    setup_logging,
)


def _record(msg: str = "test") -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="",
        lineno=0, msg=msg, args=(), exc_info=None,
    )


@pytest.fixture
def audit_lines(override_settings, tmp_path):
    """Route the audit logger to a temp file; returns a reader of parsed lines."""
    log_file = tmp_path / "audit.log"
    override_settings(AUDIT_LOG_FILE=str(log_file), LOG_LEVEL="INFO")
    setup_logging()

    def _read() -> list[dict]:
        for handler in get_audit_logger().handlers:
            handler.flush()
        return [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]

    yield _read

    for handler in get_audit_logger().handlers:
        handler.close()
    get_audit_logger().handlers.clear()


class TestJSONFormatter:

    def test_output_is_valid_json(self):
        parsed = json.loads(JSONFormatter().format(_record("hello")))
        assert parsed["message"] == "hello"
        assert parsed["level"] == "INFO"
        assert parsed["service"] == "posts-api"
        assert "timestamp" in parsed

    def test_includes_request_id(self):
        token = request_id_var.set("req-abc123")
        try:
            parsed = json.loads(JSONFormatter().format(_record()))
            assert parsed["request_id"] == "req-abc123"
        finally:
            request_id_var.reset(token)

    def test_includes_audit_data(self):
        record = _record()
        record.audit_data = {"operation": "create", "post_id": "p1"}
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["operation"] == "create"
        assert parsed["post_id"] == "p1"


class TestOperationLogging:

    def test_log_operation(self, audit_lines):
        with StoreTimer() as timer:
            pass
        log_operation("Post created", "create", 201, timer, post_id="p1")

        entry = audit_lines()[-1]
        assert entry["message"] == "Post created"
        assert entry["operation"] == "create"
        assert entry["status_code"] == 201
        assert entry["post_id"] == "p1"
        assert "latency_ms" in entry

    def test_log_rejection(self, audit_lines):
        log_rejection("get", 404, "Post not found", post_id="nope")

        entry = audit_lines()[-1]
        assert entry["message"] == "Request rejected"
        assert entry["level"] == "INFO"
        assert entry["reason"] == "Post not found"
        assert entry["status_code"] == 404

    def test_log_store_failure_keeps_full_payload(self, audit_lines):
        payload = {"code": "ConditionalCheckFailedException", "requestId": "REQ-1"}
        log_store_failure("update", payload, 400, StoreTimer(), post_id="p1")

        entry = audit_lines()[-1]
        assert entry["level"] == "WARNING"
        assert entry["store_error"] == payload
        assert entry["operation"] == "update"


class TestGenerateRequestId:

    def test_length(self):
        assert len(generate_request_id()) == 12

    def test_uniqueness(self):
        ids = {generate_request_id() for _ in range(100)}
        assert len(ids) == 100


class TestStoreTimer:

    def test_measures_elapsed(self):
        with StoreTimer() as timer:
            _ = sum(range(1000))
        assert timer.elapsed_ms > 0
        assert isinstance(timer.elapsed_ms, float)


class TestSetupLogging:

    def test_creates_stdout_handler(self, override_settings):
        override_settings(AUDIT_LOG_FILE="")
        setup_logging()
        logger = get_audit_logger()
        assert logger.name == "posts.audit"
        assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)
        assert logger.propagate is False

    def test_level_from_settings(self, override_settings):
        override_settings(LOG_LEVEL="warning")
        setup_logging()
        assert get_audit_logger().level == logging.WARNING
