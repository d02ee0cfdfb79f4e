"""
Logging configuration for wikidoc.

Provides the formatters and the root-logger setup used by the CLI and by
library callers that want wikidoc's structured warnings (parser fault
isolation, analyzer fallbacks) rendered as plain text or as JSON lines.
"""

import json
import logging
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Union


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def from_name(cls, name: Union[str, "LogLevel"]) -> "LogLevel":
        """Resolve a level from its (case-insensitive) name."""
        if isinstance(name, LogLevel):
            return name
        try:
            return cls[str(name).upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"
    DETAILED = "detailed"


# Attributes every LogRecord carries; anything else came in through extra=.
_STANDARD_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'exc_info', 'exc_text',
    'stack_info', 'message', 'taskName', 'extra_data',
})


class JSONFormatter(logging.Formatter):
    """
    Render log records as single-line JSON objects.

    Fields passed through ``extra=`` are emitted as top-level keys, which is
    how the parser reports the tag and exception type of an isolated fault.
    """

    def _extract_extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        extra_data: Dict[str, Any] = {}

        if hasattr(record, 'extra_data'):
            extra_data.update(record.extra_data)

        for attr_name, attr_value in record.__dict__.items():
            if attr_name.startswith('_') or attr_name in _STANDARD_ATTRS:
                continue
            if not callable(attr_value):
                extra_data[attr_name] = attr_value

        return extra_data

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        extra_data = self._extract_extra_fields(record)
        if extra_data:
            log_data.update(extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        try:
            return json.dumps(log_data, default=str, ensure_ascii=False, separators=(',', ':'))
        except (TypeError, ValueError):
            return json.dumps({
                "timestamp": log_data["timestamp"],
                "level": log_data["level"],
                "logger": log_data["logger"],
                "message": str(record.getMessage()),
                "serialization_error": "Failed to serialize additional data"
            }, separators=(',', ':'))


def create_formatter(log_format: LogFormat) -> logging.Formatter:
    """Create the formatter for a log format."""
    if log_format == LogFormat.JSON:
        return JSONFormatter()
    if log_format == LogFormat.DETAILED:
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
        )
    return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def configure_logging(
    level: Union[str, LogLevel] = LogLevel.INFO,
    log_format: Union[str, LogFormat] = LogFormat.STANDARD,
    log_file: Optional[Union[str, Path]] = None,
    console_handler: Optional[logging.Handler] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Existing root handlers are replaced. When ``console_handler`` is given it
    is used instead of a plain StreamHandler (the CLI passes a RichHandler);
    its formatter is left alone unless JSON output was requested.

    Args:
        level: Log level name or LogLevel
        log_format: Format name or LogFormat
        log_file: Optional file receiving the same records
        console_handler: Handler to use for console output

    Returns:
        The configured root logger
    """
    log_level = LogLevel.from_name(level)
    fmt = log_format if isinstance(log_format, LogFormat) else LogFormat(str(log_format).lower())
    formatter = create_formatter(fmt)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level.value)
    root_logger.handlers.clear()

    if console_handler is None:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
    elif fmt == LogFormat.JSON:
        console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level.value)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(log_level.value)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    return root_logger
