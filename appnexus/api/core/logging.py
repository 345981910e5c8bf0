"""Structured logging configuration for the client.

This module provides a structured logging setup using Python's standard
logging module with JSON formatting for production environments. The
library never configures logging on import; applications call
``setup_logging()`` when they want the client's handlers installed.
"""

import json
import logging
import logging.config
import sys
import traceback
from datetime import datetime
from typing import Any, Dict, Optional

from appnexus.api.core.config import ClientSettings, settings


REDACTED = "[REDACTED]"

# Keys whose values must never reach log output
SENSITIVE_KEYS = {"password", "token", "auth", "authorization", "auth_token"}

_RESERVED_ATTRS = {
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "exc_info", "exc_text", "stack_info",
    "lineno", "funcName", "created", "msecs", "relativeCreated",
    "thread", "threadName", "processName", "process", "message",
    "asctime", "timestamp", "logger", "level", "source", "taskName",
}


def redact(value: Any) -> Any:
    """Recursively replace sensitive values in mappings and sequences."""
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else redact(v)
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(redact(v) for v in value)
    return value


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs log records as JSON objects for consumption by log aggregation
    systems.

    Attributes:
        fields: List of fields to include in JSON output
    """

    # Standard fields always included
    STANDARD_FIELDS = ["name", "levelname", "message", "timestamp"]

    # Contextual fields for request tracking
    CONTEXT_FIELDS = [
        "method",        # HTTP method of the outbound call
        "endpoint",      # API endpoint path
        "category",      # Rate limit category (auth, read, write)
        "remaining",     # Permits left in the category bucket
        "status_code",   # HTTP response status
        "duration_ms",   # Call duration in milliseconds
    ]

    def __init__(
        self,
        fields: Optional[list] = None,
        datefmt: Optional[str] = None,
    ):
        """Initialize JSON formatter.

        Args:
            fields: Custom fields to include (defaults to all standard + context)
            datefmt: Date format string (ISO8601 by default)
        """
        super().__init__(datefmt=datefmt)
        self.fields = fields or (self.STANDARD_FIELDS + self.CONTEXT_FIELDS)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string representation of the log record
        """
        log_data: Dict[str, Any] = {}

        record.message = record.getMessage()

        log_data["timestamp"] = datetime.now().astimezone().isoformat()
        log_data["level"] = record.levelname
        log_data["logger"] = record.name
        log_data["message"] = record.message

        log_data["source"] = {
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
        }

        for field in self.CONTEXT_FIELDS:
            if hasattr(record, field):
                value = getattr(record, field)
                if value is not None:
                    log_data[field] = value

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in self.CONTEXT_FIELDS:
                continue
            extra = log_data.setdefault("extra", {})
            extra[key] = REDACTED if key.lower() in SENSITIVE_KEYS else redact(value)

        if record.exc_info and record.exc_info != (None, None, None):
            log_data["exception"] = traceback.format_exception(*record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class ContextFilter(logging.Filter):
    """Logging filter that adds contextual fields to log records.

    Adds default values for method, endpoint, category and the other
    contextual fields if not already present in the log record, so the
    structured format string never fails on a missing attribute.
    """

    CONTEXT_DEFAULTS = {
        "method": None,
        "endpoint": None,
        "category": None,
        "remaining": None,
        "status_code": None,
        "duration_ms": None,
    }

    def filter(self, record: logging.LogRecord) -> bool:
        for field, default in self.CONTEXT_DEFAULTS.items():
            if not hasattr(record, field):
                setattr(record, field, default)
        return True


def get_logging_config(client_settings: Optional[ClientSettings] = None) -> Dict[str, Any]:
    """Get logging configuration dictionary.

    Args:
        client_settings: Settings to read level and format from (defaults
            to the module-level settings)

    Returns:
        Logging configuration dict compatible with logging.config.dictConfig
    """
    cfg = client_settings or settings
    log_format = cfg.log_format.lower()
    log_level = cfg.log_level.upper()

    formatters = {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        },
        "structured": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s - method=%(method)s - endpoint=%(endpoint)s - category=%(category)s"
        },
    }

    if log_format == "json":
        formatters["json"] = {
            "()": "appnexus.api.core.logging.JSONFormatter",
        }
        default_formatter = "json"
    else:
        default_formatter = "structured" if log_format == "structured" else "standard"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": default_formatter,
            "stream": sys.stderr,
            "filters": ["context"],
        },
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": {
            "context": {
                "()": "appnexus.api.core.logging.ContextFilter",
            },
        },
        "handlers": handlers,
        "loggers": {
            "appnexus": {
                "level": log_level,
                "handlers": ["console"],
                "propagate": False,
            },
            "httpx": {
                "level": "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(client_settings: Optional[ClientSettings] = None) -> None:
    """Configure logging for the client."""
    logging.config.dictConfig(get_logging_config(client_settings))


def get_logger(name: str = "appnexus") -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name, defaults to "appnexus"

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


def get_log_context(
    method: Optional[str] = None,
    endpoint: Optional[str] = None,
    category: Optional[str] = None,
    **extra
) -> Dict[str, Any]:
    """Create a log context dictionary for use with extra parameter.

    Args:
        method: HTTP method
        endpoint: API endpoint path
        category: Rate limit category
        **extra: Additional custom fields

    Returns:
        Dictionary suitable for passing as extra= parameter to logging calls

    Example:
        >>> logger.info(
        ...     "Permit granted",
        ...     extra=get_log_context(method="GET", endpoint="/member", remaining=99)
        ... )
    """
    context = {
        "method": method,
        "endpoint": endpoint,
        "category": category,
    }
    context.update(extra)
    return {k: v for k, v in context.items() if v is not None}
