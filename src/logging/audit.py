"""Structured JSON audit logging for the posts API.

Every handler outcome is one JSON line on the `posts.audit` logger:
the operation name, the status code returned to the caller, store
latency, and whatever identifiers the handler knows (post_id, count).
Store failures carry the full backend error even when callers only see
the public error schema. Optional file output via AUDIT_LOG_FILE.
"""

import json
import logging
import sys
import time
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

from src.config.settings import get_settings

AUDIT_LOGGER_NAME = "posts.audit"
SERVICE_NAME = "posts-api"

# Set per HTTP request by middleware, per Lambda invocation from the context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    """One JSON object per record; `audit_data` fields are merged in flat."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        if hasattr(record, "audit_data"):
            log_entry.update(record.audit_data)
        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """Attach JSON handlers to the audit logger according to settings."""
    settings = get_settings()

    logger = logging.getLogger(AUDIT_LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.audit_log_file:
        handlers.append(logging.FileHandler(settings.audit_log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Lambda installs a root handler; don't double-log through it
    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


class StoreTimer:
    """Times a single store call in milliseconds."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)


def _emit(level: int, message: str, operation: str, status_code: int, fields: dict) -> None:
    get_audit_logger().log(
        level,
        message,
        extra={"audit_data": {"operation": operation, "status_code": status_code, **fields}},
    )


def log_operation(message: str, operation: str, status_code: int, timer: StoreTimer, **fields) -> None:
    """A completed post operation, e.g. log_operation("Post created", "create", 201, timer, post_id=...)."""
    _emit(logging.INFO, message, operation, status_code, {"latency_ms": timer.elapsed_ms, **fields})


def log_rejection(operation: str, status_code: int, reason: str, **fields) -> None:
    """A request turned away before or after the store call (400/404)."""
    _emit(logging.INFO, "Request rejected", operation, status_code, {"reason": reason, **fields})


def log_store_failure(operation: str, store_error: dict, status_code: int, timer: StoreTimer, **fields) -> None:
    """A store call that raised; `store_error` is the full backend payload."""
    _emit(
        logging.WARNING,
        "Store request failed",
        operation,
        status_code,
        {"latency_ms": timer.elapsed_ms, "store_error": store_error, **fields},
    )
