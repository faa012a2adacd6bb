"""
Structured logging configuration for elastinest.

Provides JSON logging with configurable levels and correlation id support.
The active correlation id is attached to every record and sent to
Elasticsearch as the X-Opaque-Id header so server side slow logs and tasks
can be related to client side logs.
"""

import json
import logging
import os
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, cast
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from ..transport.audit import Audit
    from ..transport.call_details import ApiCallDetails

_correlation_id: ContextVar[str | None] = ContextVar("elastinest_correlation_id", default=None)

_RESERVED_RECORD_KEYS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "getMessage",
    "message",
}


class CorrelationIDProcessor:
    """structlog processor adding the current correlation id to log events."""

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        correlation_id = _correlation_id.get()
        if correlation_id:
            event_dict["correlation_id"] = correlation_id
        return event_dict


correlation_processor = CorrelationIDProcessor()


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=UTC
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields passed through logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


def configure_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    enable_console: bool = True,
    enable_json_logging: bool = True,
    verbose: bool = False,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a log file
        enable_console: Enable console logging
        enable_json_logging: Enable JSON structured logging
        verbose: Enable verbose/debug logging
    """
    if log_level is None:
        if verbose:
            log_level = "DEBUG"
        else:
            log_level = os.getenv("ELASTINEST_LOG_LEVEL", "INFO").upper()

    numeric_level = getattr(logging, log_level, logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(numeric_level)

    formatter: logging.Formatter
    if enable_json_logging:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers: list[logging.Handler] = []
    if enable_console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        root_logger.addHandler(handler)

    if enable_json_logging:
        processors: list[Any] = [
            correlation_processor,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
        structlog.configure(
            processors=cast(Any, processors),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    logging.getLogger("elastic_transport").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set the correlation id for the current context (thread or asyncio task).

    Args:
        correlation_id: Correlation id to set (generates UUID4 if None)

    Returns:
        The correlation id that was set
    """
    if correlation_id is None:
        correlation_id = str(uuid4())
    _correlation_id.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation id for the current context."""
    _correlation_id.set(None)


def log_api_call(details: "ApiCallDetails") -> None:
    """
    Log the outcome of one API call.

    Args:
        details: Call details produced by the transport
    """
    logger = get_logger("elastinest.api")
    extra: dict[str, Any] = {
        "method": details.http_method,
        "uri": details.uri,
        "status": details.http_status_code,
        "success": details.success,
        "event_type": "api_call",
    }

    if details.success:
        logger.debug("Elasticsearch call", extra=extra)
    else:
        if details.original_exception is not None:
            extra["error"] = str(details.original_exception)
        logger.warning("Elasticsearch call failed", extra=extra)


def log_audit_event(audit: "Audit") -> None:
    """
    Log one request pipeline audit event.

    Args:
        audit: Audit record
    """
    logger = get_logger("elastinest.audit")
    extra: dict[str, Any] = {
        "audit_event": audit.event.value,
        "node": audit.node.uri if audit.node is not None else None,
        "event_type": "audit",
    }
    if audit.exception is not None:
        extra["error"] = str(audit.exception)
    logger.debug("Pipeline %s", audit.event.value, extra=extra)
