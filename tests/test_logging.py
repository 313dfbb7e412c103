"""Tests for logging configuration."""

import json
import logging
import sys
from unittest.mock import patch

from aiflow.config import Environment, Settings
from aiflow.logging_config import (
    DevFormatter,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Test message", level: int = logging.INFO, **kwargs) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="/app/module.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=kwargs.pop("exc_info", None),
    )


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test"
        assert data["message"] == "Test message"
        assert data["file"] == "/app/module.py:42"
        assert "timestamp" in data

    def test_timestamp_uses_record_time(self) -> None:
        record = _record()
        record.created = 0.0

        data = json.loads(JSONFormatter().format(record))

        assert data["timestamp"].startswith("1970-01-01T00:00:00")

    def test_format_includes_extra_fields(self) -> None:
        """Fields passed via ``extra=`` are emitted under ``extra``."""
        record = _record()
        record.retry_count = 2
        record.model = "test-model"

        data = json.loads(JSONFormatter().format(record))

        assert data["extra"] == {"retry_count": 2, "model": "test-model"}

    def test_format_without_extra(self) -> None:
        data = json.loads(JSONFormatter().format(_record()))
        assert "extra" not in data

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(_record(exc_info=exc_info)))

        assert "ValueError" in data["exception"]


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        output = DevFormatter().format(_record("Warning message", logging.WARNING))

        assert "WARNING" in output
        assert "Warning message" in output

    def test_appends_extra_fields(self) -> None:
        record = _record("Rate limited")
        record.retry = 2
        record.max_retries = 3

        output = DevFormatter().format(record)

        assert output.endswith("| Rate limited | retry=2 max_retries=3")

    def test_no_suffix_without_extra(self) -> None:
        assert DevFormatter().format(_record("plain")).endswith("| plain")


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        logger = setup_logging(level="INFO", json_output=False)
        assert logger is logging.getLogger()

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("aiflow.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_uses_dev_formatter_in_development(self) -> None:
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("aiflow.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, DevFormatter)

    def test_level_override(self) -> None:
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="verbose", json_output=False)
        assert logging.getLogger().level == logging.INFO

    def test_replaces_existing_handlers(self) -> None:
        setup_logging(level="INFO", json_output=False)
        setup_logging(level="INFO", json_output=True)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_quiets_http_client_loggers(self) -> None:
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("httpx").level == logging.WARNING


class TestGetLogger:
    """Tests for named logger retrieval."""

    def test_returns_named_logger(self) -> None:
        assert get_logger("aiflow.llm").name == "aiflow.llm"
