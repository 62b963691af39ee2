"""
Logging configuration.

Configuration:
- Development: human-readable console output
- Production: JSON lines to stdout

Environment variables (read through Settings):
- LOG_FORMAT: "json" or "console"
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR
"""

import json
import logging
import logging.config
from datetime import datetime

from erp_ledger.config import get_settings


def get_logging_config(level: str, log_format: str) -> dict:
    """Build a logging.config dictConfig for the given level and format."""
    if log_format == "json":
        formatters = {
            "json": {"()": "erp_ledger.logging_config.JsonFormatter"},
        }
        formatter = "json"
    else:
        formatters = {
            "verbose": {
                "format": "[{asctime}] {levelname} {name} {message}",
                "style": "{",
            },
        }
        formatter = "verbose"

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "": {
                "handlers": ["console"],
                "level": level,
            },
            "erp_ledger": {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "handlers": ["console"],
                "level": "WARNING",
                "propagate": False,
            },
        },
    }


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter.

    Outputs one JSON object per line with timestamp, level,
    logger and message, plus any extra= fields passed to the
    logger call.
    """

    STANDARD_ATTRS = {
        "name", "msg", "args", "levelname", "levelno", "pathname",
        "filename", "module", "lineno", "funcName", "created",
        "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "exc_info", "exc_text", "stack_info",
        "message", "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.STANDARD_ATTRS
        }
        if extras:
            log_entry["extra"] = extras

        return json.dumps(log_entry, default=str)


def configure_logging() -> None:
    """Install the logging configuration described by the settings."""
    settings = get_settings()
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    logging.config.dictConfig(get_logging_config(level, settings.LOG_FORMAT))
