"""
Logging configuration for structured JSON logging.

Log lines are JSON objects stamped with the host and process id.
"""

import os
import socket
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

APP_LOGGERS = ("core", "activations", "accounts", "catalog")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that stamps every record with the host and process."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["host"] = socket.gethostname()
        log_record["pid"] = record.process
        if not log_record.get("level"):
            log_record["level"] = record.levelname


def get_logging_config(
    environment: str = "development",
    log_level: Optional[str] = None,
    log_dir: Optional[str] = None,
) -> dict:
    """
    Get logging configuration for the application.

    Args:
        environment: Environment name (development, production, test)
        log_level: Explicit level for application loggers
        log_dir: Directory for a rotating log file (console only when omitted)

    Returns:
        Django logging configuration dictionary
    """
    level = log_level or ("DEBUG" if environment == "development" else "INFO")
    handlers = ["console"]

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s %(pathname)s %(lineno)d",
            },
            "simple": {
                "format": "{levelname} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": handlers,
            "level": "WARNING",
        },
        "loggers": {
            "django": {
                "handlers": handlers,
                "level": "INFO",
                "propagate": False,
            },
            "django.db.backends": {
                "handlers": handlers,
                "level": "WARNING",
                "propagate": False,
            },
            "urllib3": {
                "handlers": handlers,
                "level": "WARNING",
                "propagate": False,
            },
        },
    }

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "json",
            "filename": os.path.join(log_dir, "activation.log"),
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "encoding": "utf-8",
        }
        handlers.append("file")

    for name in APP_LOGGERS:
        config["loggers"][name] = {
            "handlers": handlers,
            "level": level,
            "propagate": False,
        }

    return config
