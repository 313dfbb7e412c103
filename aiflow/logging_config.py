"""Structured logging configuration.

Completion attempts, retries and request failures are logged with ``extra=``
fields (model, attempt, retry_count, status_code). The JSON formatter emits
them as one object per line; the dev formatter appends them as ``key=value``.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from aiflow.config import Environment, get_settings

# Attributes present on every LogRecord; anything else came in via ``extra=``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}

NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


def record_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Fields attached to a record through ``extra=``."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "file": f"{record.pathname}:{record.lineno}",
        }

        extra = record_extra(record)
        if extra:
            log_data["extra"] = extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


class DevFormatter(logging.Formatter):
    """Human-readable formatter with ``extra=`` fields appended."""

    FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    DATE_FORMAT = "%H:%M:%S"

    def __init__(self) -> None:
        super().__init__(fmt=self.FORMAT, datefmt=self.DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = record_extra(record)
        if not extra:
            return line
        fields = " ".join(f"{key}={value}" for key, value in extra.items())
        # Keep the traceback, if any, below the fields
        head, sep, tail = line.partition("\n")
        return f"{head} | {fields}{sep}{tail}"


def setup_logging(
    level: str | None = None,
    json_output: bool | None = None,
) -> logging.Logger:
    """Install a single stdout handler on the root logger.

    Args:
        level: Log level override (default from settings).
        json_output: Force JSON output (default: JSON outside development).

    Returns:
        Root logger instance.
    """
    settings = get_settings()
    numeric_level = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if json_output is None:
        json_output = settings.environment != Environment.DEVELOPMENT

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if json_output else DevFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers[:] = [handler]
    root_logger.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
