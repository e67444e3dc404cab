"""Structured logging with correlation IDs.

Every controller operation (fetch, approve, reject) starts a new
correlation ID, held in a context variable so concurrent operations on
the same event loop keep their own. Records carry it through
``CorrelationIDFilter``; ``JSONFormatter`` emits one object per line with
the request-list fields passed via ``extra=``.
"""

import contextvars
import json
import logging
import sys
import uuid
from datetime import UTC, datetime
from typing import Any

correlation_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

NO_CORRELATION_ID = "no-correlation-id"

TEXT_FORMAT = "%(asctime)s %(levelname)-8s [%(correlation_id)s] %(name)s: %(message)s"
TEXT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# ``extra=`` keys copied into JSON output
OPERATION_FIELDS = (
    "request_id",
    "operation",
    "status_code",
    "page",
    "limit",
    "search",
    "sequence",
)

# Third-party loggers that are chatty at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def get_correlation_id() -> str:
    """Return the current correlation ID, creating one if unset."""
    correlation_id = correlation_id_var.get()
    if not correlation_id:
        correlation_id = new_correlation_id()
    return correlation_id


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_var.set(correlation_id)


def new_correlation_id() -> str:
    """Start a fresh correlation ID for the current context.

    Returns:
        The new ID
    """
    correlation_id = uuid.uuid4().hex
    correlation_id_var.set(correlation_id)
    return correlation_id


class CorrelationIDFilter(logging.Filter):
    """Stamp each record with the active correlation ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get() or NO_CORRELATION_ID  # type: ignore
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
        }
        entry.update(
            {name: getattr(record, name) for name in OPERATION_FIELDS if hasattr(record, name)}
        )

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = record.stack_info

        return json.dumps(entry, default=str)


def _configure_handler(
    handler: logging.Handler,
    level: str,
    formatter: logging.Formatter,
    correlation_filter: logging.Filter,
) -> logging.Handler:
    handler.setLevel(level)
    handler.addFilter(correlation_filter)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> None:
    """Configure root logging for the admin tool.

    Console output goes to stderr; stdout is reserved for tables and JSON.
    A log file, when given, is always written as JSON.

    Args:
        level: Log level name
        json_format: JSON lines on the console instead of plain text
        log_file: Optional path of an additional JSON log file
    """
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    correlation_filter = CorrelationIDFilter()
    console_formatter: logging.Formatter = (
        JSONFormatter() if json_format else logging.Formatter(TEXT_FORMAT, TEXT_DATE_FORMAT)
    )
    root.addHandler(
        _configure_handler(
            logging.StreamHandler(sys.stderr), level, console_formatter, correlation_filter
        )
    )

    if log_file:
        root.addHandler(
            _configure_handler(
                logging.FileHandler(log_file), level, JSONFormatter(), correlation_filter
            )
        )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.debug(f"Logging configured at {level} ({'json' if json_format else 'text'})")


__all__ = [
    "correlation_id_var",
    "get_correlation_id",
    "set_correlation_id",
    "new_correlation_id",
    "CorrelationIDFilter",
    "JSONFormatter",
    "setup_logging",
]
