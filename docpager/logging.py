"""
Structured logging configuration with optional Loki integration.

This module provides logging for the pagination library with support for:
- Contextual fields (store name, cache namespace, caller-supplied ids)
- JSON-formatted output for files and Loki
- Human-readable console output for development
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

from docpager.constants import LOKI_MAX_LOG_SIZE_BYTES
from docpager.settings import app_settings

# Context variables for storing call-specific logging context
log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

_RESERVED_RECORD_ATTRS = frozenset(
    [
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "exc_info",
        "exc_text",
        "stack_info",
        "taskName",
        "request_id",
    ]
)


def set_log_context(**kwargs: Any) -> None:
    """
    Set contextual fields for structured logging.

    Fields are attached to every JSON log record emitted within the current
    context (for example, the request being served by the caller).

    Args:
        **kwargs: Key-value pairs to add to log context.

    Example:
        >>> set_log_context(request_id="abc123", store="Article")
        >>> logger.info("Paginating")  # Will include request_id and store
    """
    current = dict(log_context.get())
    current.update(kwargs)
    log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """
    Get current log context.

    Returns:
        Dictionary of contextual log fields.
    """
    return log_context.get()


def clear_log_context() -> None:
    """Clear the log context."""
    log_context.set({})


class StructuredJSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    This formatter outputs logs in JSON format with:
    - Standard fields: timestamp, level, logger, message
    - Additional contextual fields from log_context
    - Exception information when present
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: The log record to format.

        Returns:
            JSON string with structured log data.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = get_log_context()
        if context:
            log_data.update(context)

        log_data["environment"] = app_settings.ENVIRONMENT

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Extra fields passed via logger.x(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_ATTRS:
                log_data[key] = value

        # Truncate message if too long (for Loki compatibility)
        json_str = json.dumps(log_data, default=str)
        if len(json_str) > LOKI_MAX_LOG_SIZE_BYTES:
            log_data["message"] = (
                log_data["message"][: LOKI_MAX_LOG_SIZE_BYTES - 1000]
                + "... [TRUNCATED]"
            )
            json_str = json.dumps(log_data, default=str)

        return json_str


class HumanReadableFormatter(logging.Formatter):
    """
    Human-readable formatter for console output (non-JSON).

    Uses different format strings based on log level for better readability
    during development.
    """

    INFO_FMT = "%(asctime)s - [%(request_id)s] %(levelname)s: %(message)s"
    ERROR_FMT = "%(asctime)s - [%(request_id)s] %(levelname)s: %(module)s.%(funcName)s:%(lineno)d - %(message)s"

    def __init__(self, *args: Any, **kwargs: Any):
        """Initialize the formatter."""
        super().__init__(*args, **kwargs)
        self._formatters = {
            logging.INFO: logging.Formatter(
                self.INFO_FMT, datefmt="%Y-%m-%d %H:%M:%S"
            ),
            logging.WARNING: logging.Formatter(
                self.ERROR_FMT, datefmt="%Y-%m-%d %H:%M:%S"
            ),
            logging.ERROR: logging.Formatter(
                self.ERROR_FMT, datefmt="%Y-%m-%d %H:%M:%S"
            ),
            logging.DEBUG: logging.Formatter(
                self.ERROR_FMT, datefmt="%Y-%m-%d %H:%M:%S"
            ),
        }

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record with the request id from the log context.

        Args:
            record: The log record to format.

        Returns:
            Formatted log string.
        """
        record.request_id = get_log_context().get("request_id", "-")

        formatter = self._formatters.get(
            record.levelno, self._formatters[logging.INFO]
        )
        return formatter.format(record)


def setup_logging() -> logging.Logger:
    """
    Configure the ``docpager`` logger.

    This function sets up:
    - Console handler with human-readable format (if LOG_CONSOLE_ENABLED)
    - File handler for errors (JSON format), if LOG_FILE_PATH is set
    - Loki handler for centralized logging (if enabled)

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger("docpager")
    logger.setLevel(getattr(logging, app_settings.LOG_LEVEL.upper()))

    # Clear existing handlers to avoid duplicates
    logger.handlers.clear()

    if app_settings.LOG_CONSOLE_ENABLED:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(HumanReadableFormatter())
        logger.addHandler(console_handler)
    else:
        # Records still propagate to the root logger
        logger.addHandler(logging.NullHandler())

    if app_settings.LOG_FILE_PATH:
        try:
            file_handler = logging.FileHandler(app_settings.LOG_FILE_PATH)
            file_handler.setLevel(logging.ERROR)
            file_handler.setFormatter(StructuredJSONFormatter())
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not create file handler: {e}")

    if app_settings.LOKI_ENABLED:
        try:
            from logging_loki import LokiHandler

            loki_handler = LokiHandler(
                url=f"{app_settings.LOKI_URL}/loki/api/v{app_settings.LOKI_VERSION}/push",
                tags={
                    "application": "docpager",
                    "environment": app_settings.ENVIRONMENT,
                },
                version=app_settings.LOKI_VERSION,
            )
            loki_handler.setLevel(logging.INFO)
            loki_handler.setFormatter(StructuredJSONFormatter())
            logger.addHandler(loki_handler)
            logger.info("Loki handler configured successfully")
        except Exception as e:
            logger.warning(f"Could not configure Loki handler: {e}")

    return logger


# Create default logger instance
logger = setup_logging()
