"""
Logging configuration for Livedoc.

Builds the process-wide logging setup from LivedocSettings: plain or JSON
records on stderr, plus an optional log file.
"""

import logging.config
from typing import Any

from livedoc.utils.config import LivedocSettings

PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def build_logging_config(settings: LivedocSettings, verbose: bool = False) -> dict[str, Any]:
    """Get the dictConfig for the given settings.

    Args:
        settings: Application settings; log_level, log_structured and log_file are used
        verbose: Force DEBUG regardless of the configured level
    """
    level = "DEBUG" if verbose or settings.debug else settings.log_level.upper()
    formatter = "json" if settings.log_structured else "plain"
    handlers = ["console"]

    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": PLAIN_FORMAT, "datefmt": DATE_FORMAT},
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": JSON_FORMAT,
                "datefmt": DATE_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": formatter,
                "stream": "ext://sys.stderr",
            },
        },
        # Library loggers (neo4j) stay at WARNING unless livedoc runs verbose
        "root": {"level": "DEBUG" if verbose else "WARNING", "handlers": handlers},
        "loggers": {
            "livedoc": {"level": level, "handlers": handlers, "propagate": False},
        },
    }

    log_file = settings.get_log_file_path()
    if log_file:
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "formatter": formatter,
            "filename": str(log_file),
        }
        handlers.append("file")

    return config


def configure_logging(settings: LivedocSettings, verbose: bool = False) -> None:
    """Apply the logging configuration derived from settings."""
    logging.config.dictConfig(build_logging_config(settings, verbose))
