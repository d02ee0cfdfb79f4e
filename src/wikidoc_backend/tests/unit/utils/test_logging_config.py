"""
Tests for logging configuration and the JSON formatter.
"""

import json
import logging
import sys

import pytest

from wikidoc_backend.utils.logging_config import (
    JSONFormatter,
    LogFormat,
    LogLevel,
    configure_logging,
    create_formatter,
)


def make_record(message="hello", **extra):
    record = logging.LogRecord("wikidoc_backend.test", logging.WARNING, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_fields(self):
        data = json.loads(JSONFormatter().format(make_record()))
        assert data["level"] == "WARNING"
        assert data["logger"] == "wikidoc_backend.test"
        assert data["message"] == "hello"

    def test_extra_fields_are_included(self):
        record = make_record(tag="ac:structured-macro", exception_type="MacroHandlerError", depth=3)
        data = json.loads(JSONFormatter().format(record))
        assert data["tag"] == "ac:structured-macro"
        assert data["exception_type"] == "MacroHandlerError"
        assert data["depth"] == 3

    def test_exception_is_rendered(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]


class TestConfigureLogging:
    """Tests for root logger setup."""

    def test_level_and_handlers(self, tmp_path):
        log_file = tmp_path / "wikidoc.log"
        root = configure_logging("debug", "detailed", log_file=log_file)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2

        logging.getLogger("wikidoc_backend.test").info("to file")
        for handler in root.handlers:
            handler.flush()
        assert "to file" in log_file.read_text(encoding="utf-8")
        for handler in root.handlers:
            handler.close()

    def test_json_format_replaces_console_formatter(self):
        handler = logging.StreamHandler()
        sentinel = logging.Formatter("%(message)s")
        handler.setFormatter(sentinel)

        configure_logging(LogLevel.INFO, LogFormat.STANDARD, console_handler=handler)
        assert handler.formatter is sentinel

        configure_logging(LogLevel.INFO, LogFormat.JSON, console_handler=handler)
        assert isinstance(handler.formatter, JSONFormatter)

    def test_unknown_level(self):
        with pytest.raises(ValueError):
            LogLevel.from_name("loud")

    def test_create_formatter(self):
        assert isinstance(create_formatter(LogFormat.JSON), JSONFormatter)
        assert not isinstance(create_formatter(LogFormat.STANDARD), JSONFormatter)
