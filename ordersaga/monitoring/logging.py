"""
Structured logging for order operations

Every coordinator operation runs inside bind_order_context(), so log records
emitted anywhere below it (store, inventory adapter, listeners) carry the
order id, the operation name and a correlation id.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Context variable for propagating order context
order_context: ContextVar[dict[str, Any]] = ContextVar("order_context", default={})


@contextmanager
def bind_order_context(
    order_id: str | None,
    operation: str,
    correlation_id: str | None = None,
) -> Iterator[dict[str, Any]]:
    """
    Set the order context for the duration of a block.

    The previous context is restored on exit, so nested operations and
    concurrent tasks never leak context into each other.
    """
    context = {
        "order_id": order_id,
        "operation": operation,
        "correlation_id": correlation_id or order_id,
    }
    token = order_context.set(context)
    try:
        yield context
    finally:
        order_context.reset(token)


class OrderJsonFormatter(logging.Formatter):
    """
    JSON formatter for order logs with structured fields
    """

    # Fields to extract from log record if present
    _EXTRA_FIELDS = (
        "order_id",
        "operation",
        "correlation_id",
        "status",
        "previous_status",
        "error_type",
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON"""
        log_entry = self._build_base_entry(record)
        self._add_order_context(log_entry)
        self._add_record_extras(log_entry, record)
        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, default=str)

    def _build_base_entry(self, record: logging.LogRecord) -> dict[str, Any]:
        """Build base log entry with standard fields."""
        return {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

    def _add_order_context(self, log_entry: dict[str, Any]) -> None:
        """Add order context to log entry if available."""
        context = order_context.get()
        if context:
            log_entry.update(context)

    def _add_record_extras(self, log_entry: dict[str, Any], record: logging.LogRecord) -> None:
        """Add extra fields from log record."""
        for field in self._EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value:
                log_entry[field] = value


class OrderContextFilter(logging.Filter):
    """
    Logging filter that adds order context to log records
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = order_context.get()

        record.order_id = context.get("order_id") or "-"
        record.operation = context.get("operation") or "-"
        record.correlation_id = context.get("correlation_id") or ""

        return True


def setup_order_logging(
    log_level: str = "INFO", json_format: bool = True, include_console: bool = True
) -> logging.Logger:
    """
    Set up structured logging for the ordersaga namespace

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_format: Use JSON formatting for structured logs
        include_console: Include console handler

    Returns:
        The configured 'ordersaga' logger
    """
    root_logger = logging.getLogger("ordersaga")
    root_logger.setLevel(getattr(logging, log_level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if include_console:
        console_handler = logging.StreamHandler()
        console_handler.addFilter(OrderContextFilter())

        if json_format:
            console_handler.setFormatter(OrderJsonFormatter())
        else:
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(order_id)s:%(operation)s] - %(message)s"
            )
            console_handler.setFormatter(formatter)

        root_logger.addHandler(console_handler)

    return root_logger
