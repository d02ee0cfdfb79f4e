"""
Configuration file paths and constants for wikidoc.

This module provides the ConfigPaths dataclass containing default file names
used throughout the configuration system.
"""

from dataclasses import dataclass


@dataclass
class ConfigPaths:
    """Configuration file paths and constants."""

    DEFAULT_CONFIG_FILE: str = "wikidoc.config.json"
    ENV_FILE: str = ".env"
