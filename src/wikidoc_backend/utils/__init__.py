"""
Utilities package for wikidoc.

This package contains the configuration and logging helpers used throughout
the wikidoc system.
"""

from .config import ConfigManager, ConfigPaths
from .logging_config import LogFormat, LogLevel, configure_logging

__all__ = [
    "ConfigManager",
    "ConfigPaths",
    "LogFormat",
    "LogLevel",
    "configure_logging",
]
