"""
shadowcache - Logging Setup Tests
"""

import json
import logging
import sys
from collections.abc import Generator

import pytest

from shadowcache.observability import JSONFormatter, configure_logging


@pytest.fixture
def restore_logger() -> Generator[logging.Logger, None, None]:
    """Undo configure_logging() so other tests keep propagating to caplog."""
    logger = logging.getLogger("shadowcache")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_extra_fields_included(self) -> None:
        """Test extra= fields appear in the JSON record."""
        record = logging.LogRecord("shadowcache.cache", logging.WARNING, __file__, 10, "flush %s", ("all",), None)
        record.prefix = "app:"

        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "flush all"
        assert data["level"] == "WARNING"
        assert data["logger"] == "shadowcache.cache"
        assert data["prefix"] == "app:"
        assert data["timestamp"].endswith("Z")
        assert "args" not in data

    def test_exception_included(self) -> None:
        """Test exc_info is rendered."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: boom" in data["exception"]


class TestConfigureLogging:
    """Test suite for configure_logging()."""

    def test_installs_single_handler(self, restore_logger: logging.Logger) -> None:
        """Test repeated calls replace the handler."""
        configure_logging("DEBUG")
        logger = configure_logging("WARNING")

        assert logger is restore_logger
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)
        assert logger.level == logging.WARNING

    def test_text_format(self, restore_logger: logging.Logger) -> None:
        """Test the plain text formatter option."""
        logger = configure_logging("INFO", json_format=False)
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)
