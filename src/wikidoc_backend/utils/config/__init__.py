"""Configuration management package.

This package provides a layered configuration system with support for:
- Built-in defaults with JSON schema validation
- An optional wikidoc.config.json file
- WIKIDOC_* environment variable overrides (.env aware)
- Typed settings views for the parser, extractor and markup source

Usage:
    from wikidoc_backend.utils.config import ConfigManager

    config = ConfigManager()
    max_depth = config.get("parser.max_depth", 100)
"""

from .defaults import CONFIG_SCHEMA, DEFAULT_CONFIG
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .manager import ConfigManager, merge_configs
from .paths import ConfigPaths
from .schema_validation import SchemaValidator
from .settings import ExtractionSettings, ParserSettings, SourceSettings

__all__ = [
    'ConfigManager',
    'ConfigPaths',
    'FileOperations',
    'SchemaValidator',
    'EnvironmentHandler',
    'ParserSettings',
    'ExtractionSettings',
    'SourceSettings',
    'DEFAULT_CONFIG',
    'CONFIG_SCHEMA',
    'merge_configs',
]
