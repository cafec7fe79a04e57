"""
Logging configuration for structured JSON logging.

Console output is always JSON. When a log directory is given, rotating
files are added: combined.log (everything), error.log (errors only) and
security.log (the ``security`` logger).
"""

import sys
from pathlib import Path
from typing import Optional

from opentelemetry import trace
from opentelemetry.trace import format_span_id, format_trace_id
from pythonjsonlogger import jsonlogger

JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d"
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 5

APP_LOGGERS = ("core", "api", "authentication", "subscriptions")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds trace context."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            log_record["trace_id"] = format_trace_id(span_context.trace_id)
            log_record["span_id"] = format_span_id(span_context.span_id)


def _file_handler(log_dir: Path, filename: str, level: str = "DEBUG") -> dict:
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "json",
        "filename": str(log_dir / filename),
        "maxBytes": MAX_BYTES,
        "backupCount": BACKUP_COUNT,
        "level": level,
    }


def get_logging_config(log_level: str = "INFO", log_dir: Optional[str] = None) -> dict:
    """
    Get logging configuration for the application.

    Args:
        log_level: Level for the application loggers
        log_dir: Directory for rotating log files (console only if omitted)

    Returns:
        Django logging configuration dictionary
    """
    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": sys.stdout,
        },
    }
    default_handlers = ["console"]
    security_handlers = ["console"]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers["combined"] = _file_handler(directory, "combined.log")
        handlers["error"] = _file_handler(directory, "error.log", level="ERROR")
        handlers["security"] = _file_handler(directory, "security.log")
        default_handlers = ["console", "combined", "error"]
        security_handlers = ["console", "security", "combined"]

    app_logger = {"handlers": default_handlers, "level": log_level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": JSON_FORMAT,
            },
            "verbose": {
                "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
                "style": "{",
            },
        },
        "handlers": handlers,
        "root": {
            "handlers": default_handlers,
            "level": log_level,
        },
        "loggers": {
            "django": {
                "handlers": default_handlers,
                "level": "INFO",
                "propagate": False,
            },
            "django.request": {
                "handlers": default_handlers,
                "level": "WARNING",
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": default_handlers,
                "level": "WARNING",
                "propagate": False,
            },
            "security": {
                "handlers": security_handlers,
                "level": "INFO",
                "propagate": False,
            },
            **{name: dict(app_logger) for name in APP_LOGGERS},
        },
    }
