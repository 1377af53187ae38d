"""Structured logging configuration for btmeta.

Provides logging setup with correlation IDs, structured JSON output, a Rich
console handler and configurable log levels. Console logs go to stderr so
they never mix with command output on stdout.
"""

from __future__ import annotations

import json
import logging
import logging.config
import time
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from rich.console import Console
from rich.logging import RichHandler

from btmeta.utils.exceptions import BtMetaError

if TYPE_CHECKING:
    from btmeta.models import ObservabilityConfig

ROOT_LOGGER = "btmeta"

# Help type checker understand the ContextVar generic with a None default
correlation_id: ContextVar[str | None] = cast(
    "ContextVar[str | None]",
    ContextVar("correlation_id", default=None),
)


class CorrelationFilter(logging.Filter):
    """Filter to add correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to log record."""
        record.correlation_id = correlation_id.get() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for logs."""

    EXCLUDED_KEYS = frozenset(
        {
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
            "message",
            "correlation_id",
        }
    )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": time.time(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "correlation_id"):
            log_entry["correlation_id"] = record.correlation_id

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Extra fields passed via ``extra=``
        log_entry.update(
            {
                key: value
                for key, value in record.__dict__.items()
                if key not in self.EXCLUDED_KEYS
            }
        )

        return json.dumps(log_entry, default=str)


def create_rich_handler(
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
) -> logging.Handler:
    """Create a RichHandler that writes to stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        markup=False,
    )
    handler.setLevel(level)
    return handler


def setup_logging(config: ObservabilityConfig) -> None:
    """Set up logging configuration."""
    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)

    level = config.log_level.value
    logging_config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "rich": {
                "format": "%(name)s: %(message)s",
            },
            "structured": {
                "()": StructuredFormatter,
            },
            "simple": {
                "format": config.log_format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "filters": {
            "correlation": {
                "()": CorrelationFilter,
            },
        },
        "handlers": {},
        "loggers": {
            ROOT_LOGGER: {
                "level": level,
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }

    if config.structured_logging:
        logging_config["handlers"]["console"] = {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "structured",
            "filters": ["correlation"],
            "stream": "ext://sys.stderr",
        }
    else:
        logging_config["handlers"]["console"] = {
            "()": create_rich_handler,
            "level": level,
            "formatter": "rich",
            "filters": ["correlation"],
        }

    if config.log_file:
        logging_config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": level,
            "formatter": "structured" if config.structured_logging else "simple",
            "filters": ["correlation"],
            "filename": config.log_file,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "encoding": "utf-8",
        }
        logging_config["loggers"][ROOT_LOGGER]["handlers"].append("file")

    logging.config.dictConfig(logging_config)

    if config.log_correlation_id:
        correlation_id.set(str(uuid.uuid4()))


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the btmeta namespace."""
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def set_correlation_id(corr_id: str | None = None) -> str:
    """Set correlation ID for the current context."""
    if corr_id is None:
        corr_id = str(uuid.uuid4())
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return correlation_id.get()


class LoggingContext:
    """Context manager that logs the start, end and duration of an operation."""

    def __init__(self, operation: str, logger: logging.Logger | None = None, **kwargs):
        """Initialize operation context manager."""
        self.operation = operation
        self.kwargs = kwargs
        self.logger = logger or get_logger(self.__class__.__module__)
        self.start_time: float | None = None

    def __enter__(self):
        """Enter the context manager."""
        self.start_time = time.time()
        set_correlation_id()
        self.logger.debug("Starting %s", self.operation, extra=self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit the context manager."""
        duration = time.time() - self.start_time if self.start_time else 0

        if exc_type is None:
            self.logger.debug(
                "Completed %s in %.3fs",
                self.operation,
                duration,
                extra=self.kwargs,
            )
        else:
            self.logger.debug(
                "Failed %s in %.3fs: %s",
                self.operation,
                duration,
                exc_val,
                extra=self.kwargs,
            )

        return False  # Don't suppress exceptions


def log_exception(
    logger: logging.Logger,
    exc: Exception,
    context: str = "",
    exc_info: bool = True,
) -> None:
    """Log an exception with context."""
    if isinstance(exc, BtMetaError):
        logger.error(
            "%s: %s",
            context,
            exc.message,
            extra={"details": exc.details},
            exc_info=exc_info,
        )
    else:
        logger.error("%s: %s", context, exc, exc_info=exc_info)
