"""
Structured logging configuration for supersede.

Provides JSON-formatted logs carrying the name of the instrumented
operation, so attempts of the same operation can be correlated.

Environment Variables:
    SUPERSEDE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: INFO
    SUPERSEDE_LOG_FORMAT: Log format (json, text) - default: json

Usage:
    from supersede.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, operation="search")
    logger.info("Search issued", extra={"query": "py"})
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logger with structured logging.

    Explicit arguments win over environment variables:
    - SUPERSEDE_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
    - SUPERSEDE_LOG_FORMAT: json, text (default: json)

    Unknown levels fall back to INFO, unknown formats to text.
    """
    level_name = (level or os.getenv("SUPERSEDE_LOG_LEVEL", "INFO")).upper()
    log_format = (log_format or os.getenv("SUPERSEDE_LOG_FORMAT", "json")).lower()
    log_level = LEVELS.get(level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(OperationFilter())

    if log_format == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(operation)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [operation=%(operation)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    # asyncio reports unretrieved task exceptions at ERROR; keep its debug chatter out
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str, operation: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger tagged with an operation name.

    Args:
        name: Logger name (typically __name__)
        operation: Name of the wrapped operation (e.g. "search")

    Returns:
        LoggerAdapter with operation in extra fields
    """
    logger = logging.getLogger(name)
    return logging.LoggerAdapter(logger, {"operation": operation or "N/A"})


class OperationFilter(logging.Filter):
    """
    Logging filter that adds operation to all log records.

    Ensures records emitted without get_logger() still format cleanly.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "operation"):
            record.operation = "N/A"  # type: ignore
        return True
