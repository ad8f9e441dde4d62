"""
Tests for the logging module.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from io import StringIO

import pytest

from weather_mcp.config import LoggingConfig
from weather_mcp.logging import JSONFormatter, get_logger, setup_logging

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def string_handler() -> logging.StreamHandler[StringIO]:
    """Create a string handler for capturing log output."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    return handler


@pytest.fixture(autouse=True)
def _cleanup_loggers() -> Iterator[None]:
    """Clean up loggers after each test (autouse fixture)."""
    yield
    logger = logging.getLogger("weather_mcp")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# =============================================================================
# Tests for JSONFormatter
# =============================================================================


class TestJSONFormatter:
    """Tests for JSONFormatter class."""

    def test_basic_fields(self, string_handler: logging.StreamHandler[StringIO]) -> None:
        """Test that the base fields are present."""
        logger = logging.getLogger("weather_mcp.test.basic")
        logger.addHandler(string_handler)
        logger.setLevel(logging.INFO)
        try:
            logger.info("hello %s", "world")
        finally:
            logger.removeHandler(string_handler)

        entry = json.loads(string_handler.stream.getvalue())
        assert entry["message"] == "hello world"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "weather_mcp.test.basic"
        assert "timestamp" in entry

    def test_extra_fields(self, string_handler: logging.StreamHandler[StringIO]) -> None:
        """Test that extra fields are included."""
        logger = logging.getLogger("weather_mcp.test.extra")
        logger.addHandler(string_handler)
        logger.setLevel(logging.INFO)
        try:
            logger.info("fetch failed", extra={"url": "https://x", "status_code": 503})
        finally:
            logger.removeHandler(string_handler)

        entry = json.loads(string_handler.stream.getvalue())
        assert entry["url"] == "https://x"
        assert entry["status_code"] == 503

    def test_exception_info(self, string_handler: logging.StreamHandler[StringIO]) -> None:
        """Test that exceptions are rendered."""
        logger = logging.getLogger("weather_mcp.test.exc")
        logger.addHandler(string_handler)
        try:
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("failed")
        finally:
            logger.removeHandler(string_handler)

        entry = json.loads(string_handler.stream.getvalue())
        assert "RuntimeError: boom" in entry["exception"]


# =============================================================================
# Tests for setup_logging / get_logger
# =============================================================================


class TestSetupLogging:
    """Tests for setup_logging and get_logger."""

    def test_setup_logging_defaults_to_stderr(self) -> None:
        """Test that diagnostics go to stderr by default."""
        logger = setup_logging(level="DEBUG")
        assert logger.name == "weather_mcp"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.handlers[0].stream is sys.stderr
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.propagate is False

    def test_setup_logging_from_config(self) -> None:
        """Test configuration-driven setup."""
        config = LoggingConfig(level="error", log_to_stdout=True, json_format=False)
        logger = setup_logging(config)
        assert logger.level == logging.ERROR
        assert logger.handlers[0].stream is sys.stdout
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_idempotent(self) -> None:
        """Test that repeated setup does not duplicate handlers."""
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_get_logger_prefix(self) -> None:
        """Test that the package prefix is added."""
        assert get_logger("tools").name == "weather_mcp.tools"
        assert get_logger("weather_mcp.server").name == "weather_mcp.server"
