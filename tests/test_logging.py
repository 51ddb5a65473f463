"""Tests for logging configuration."""

import json
import logging
import sys
from decimal import Decimal
from unittest.mock import patch

from src.config import Environment, Settings
from src.logging_config import (
    DevFormatter,
    JSONFormatter,
    extract_extra,
    get_logger,
    setup_logging,
)


def _record(msg: str = "Search completed", level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="src.search.service",
        level=level,
        pathname="/app/src/search/service.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestExtractExtra:
    """Tests for extra-field extraction."""

    def test_plain_record_has_no_extra(self) -> None:
        """Standard LogRecord attributes are not reported as extra."""
        assert extract_extra(_record()) == {}

    def test_collects_extra_fields(self) -> None:
        """Fields set via `extra=` are collected."""
        record = _record(count=2, limit=5)
        assert extract_extra(record) == {"count": 2, "limit": 5}

    def test_logger_extra_round_trip(self) -> None:
        """Extras passed to a logger call reach the record."""
        captured: list[logging.LogRecord] = []

        class _Capture(logging.Handler):
            def emit(self, record: logging.LogRecord) -> None:
                captured.append(record)

        logger = get_logger("tests.extra")
        handler = _Capture()
        logger.addHandler(handler)
        try:
            logger.warning("probe", extra={"collection": "Phase2Website"})
        finally:
            logger.removeHandler(handler)

        assert extract_extra(captured[0]) == {"collection": "Phase2Website"}


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_format_basic_message(self) -> None:
        """Basic log message is formatted as JSON."""
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "src.search.service"
        assert data["message"] == "Search completed"
        assert data["file"] == "/app/src/search/service.py:42"
        assert "timestamp" in data
        assert "extra" not in data

    def test_format_includes_extra(self) -> None:
        """Extra fields are nested under `extra`."""
        data = json.loads(JSONFormatter().format(_record(count=3, query_length=17)))
        assert data["extra"] == {"count": 3, "query_length": 17}

    def test_format_serializes_unknown_types(self) -> None:
        """Non-JSON extras fall back to str()."""
        data = json.loads(JSONFormatter().format(_record(similarity=Decimal("0.82"))))
        assert data["extra"]["similarity"] == "0.82"

    def test_format_with_exception(self) -> None:
        """Exception info is included in output."""
        try:
            raise ConnectionError("store down")
        except ConnectionError:
            exc_info = sys.exc_info()

        record = _record("Search error", level=logging.ERROR)
        record.exc_info = exc_info
        data = json.loads(JSONFormatter().format(record))

        assert "ConnectionError" in data["exception"]


class TestDevFormatter:
    """Tests for development formatter."""

    def test_format_includes_level(self) -> None:
        """Development format includes level, logger and message."""
        output = DevFormatter().format(_record("Store unreachable", level=logging.WARNING))

        assert "WARNING" in output
        assert "src.search.service" in output
        assert "Store unreachable" in output

    def test_format_appends_extra_pairs(self) -> None:
        """Extras are appended as sorted key=value pairs."""
        output = DevFormatter().format(_record(limit=5, count=2))
        assert output.endswith("| count=2 limit=5")


class TestSetupLogging:
    """Tests for logging setup."""

    def test_returns_root_logger(self) -> None:
        """setup_logging returns root logger."""
        logger = setup_logging(level="INFO", json_output=False)
        assert logger is logging.getLogger()

    def test_uses_json_in_production(self) -> None:
        """JSON output is used in production environment."""
        mock_settings = Settings(environment=Environment.PRODUCTION)

        with patch("src.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_uses_dev_formatter_in_development(self) -> None:
        """Dev formatter is used in development environment."""
        mock_settings = Settings(environment=Environment.DEVELOPMENT)

        with patch("src.logging_config.get_settings", return_value=mock_settings):
            setup_logging()

        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, DevFormatter)

    def test_level_override(self) -> None:
        """Log level can be overridden."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiets_http_client_loggers(self) -> None:
        """httpx and uvicorn access logs are raised to WARNING."""
        setup_logging(level="DEBUG", json_output=False)
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING
