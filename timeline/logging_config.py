"""
Structured logging configuration for the timeline engine and CLI.

Provides JSON-formatted logs with a `source` field (the document log being
processed) for correlating normalizer drops with their input.

Environment Variables:
    TIMELINE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    TIMELINE_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from timeline.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, source="data.json")
    logger.info("Normalized document log")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class SourceFilter(logging.Filter):
    """
    Logging filter that guarantees a `source` attribute on every record.

    Records logged without get_logger(source=...) get "N/A".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "source"):
            record.source = "N/A"  # type: ignore[attr-defined]
        return True


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR (default: TIMELINE_LOG_LEVEL or INFO)
        fmt: json or text (default: TIMELINE_LOG_FORMAT or text)
    """
    log_level = (level or os.getenv("TIMELINE_LOG_LEVEL", "INFO")).upper()
    log_format = (fmt or os.getenv("TIMELINE_LOG_FORMAT", "text")).lower()
    numeric_level = LEVELS.get(log_level, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # stderr keeps CLI --json output on stdout parseable
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.addFilter(SourceFilter())

    if log_format == "json":
        formatter: logging.Formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(source)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [source=%(source)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # Silence noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str, source: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger tagged with the document log source.

    Args:
        name: Logger name (typically __name__)
        source: Path or URL of the log being processed

    Returns:
        LoggerAdapter with `source` in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"source": source or "N/A"})
