"""
Main configuration manager for wikidoc.

This module provides the ConfigManager class that layers built-in defaults,
an optional JSON configuration file and environment variable overrides, then
validates the result.
"""

import logging
import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
)
from .defaults import DEFAULT_CONFIG
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .paths import ConfigPaths
from .schema_validation import SchemaValidator


logger = logging.getLogger(__name__)

_MISSING = object()


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge two configuration dictionaries.

    Nested dictionaries are merged key by key; any other value in
    ``override`` replaces the one in ``base``. Neither input is modified.
    """
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


class ConfigManager:
    """
    Configuration manager for wikidoc.

    Handles loading, validation, and merging of configuration from multiple sources:
    - Built-in defaults
    - An optional wikidoc.config.json file
    - WIKIDOC_* environment variables (a .env file is loaded first)
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
    ) -> None:
        """
        Initialize the ConfigManager.

        Args:
            config_file: Path to configuration file. When omitted the default
                wikidoc.config.json is used if it exists; an explicitly given
                file must exist.
            project_root: Project root directory (default: current working directory)
            load_env: Whether to load environment variables from .env file
        """
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.paths = ConfigPaths()
        self._explicit_file = config_file is not None
        self.config_file = config_file or self.paths.DEFAULT_CONFIG_FILE

        self._config: Dict[str, Any] = {}
        self._loaded = False
        self.logger = logger

        self.file_ops = FileOperations(self.project_root, self.paths.ENV_FILE)
        self.schema_validator = SchemaValidator()
        self.env_handler = EnvironmentHandler()

        if load_env:
            self.file_ops.load_environment_variables()

    @property
    def config(self) -> Dict[str, Any]:
        """Get the current configuration. Loads if not already loaded."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._loaded

    def load_config(
        self,
        force_reload: bool = False,
        validate: bool = True
    ) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Args:
            force_reload: Force reloading even if already loaded
            validate: Whether to validate configuration against schema

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigurationFileNotFoundError: If an explicit config file is missing
            ConfigurationValidationError: If validation fails
            ConfigurationError: If loading fails for any other reason
        """
        if self._loaded and not force_reload:
            self.logger.debug("Configuration already loaded, returning cached version")
            return deepcopy(self._config)

        try:
            config = deepcopy(DEFAULT_CONFIG)

            config_path = self.file_ops.resolve_path(self.config_file)
            if config_path.exists() or self._explicit_file:
                file_config = self.file_ops.load_json_file(config_path)
                config = merge_configs(config, file_config)
            else:
                self.logger.debug(f"No configuration file at {config_path}, using defaults")

            config = self.env_handler.apply_environment_overrides(config)

            if validate:
                self.schema_validator.validate_config(config, str(config_path))

            self._config = config
            self._loaded = True
            self.logger.debug("Configuration loaded successfully")
            return deepcopy(self._config)

        except ConfigurationError:
            self._loaded = False
            raise
        except FileNotFoundError as e:
            self._loaded = False
            raise ConfigurationFileNotFoundError(f"Configuration file not found: {e}") from e
        except Exception as e:
            error_msg = f"Unexpected error loading configuration: {e}"
            self.logger.error(error_msg, exc_info=True)
            self._loaded = False
            raise ConfigurationError(error_msg) from e

    def reload_config(self) -> Dict[str, Any]:
        """Force reload configuration from all sources."""
        return self.load_config(force_reload=True)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by key using dot notation.

        Args:
            key: Configuration key (supports dot notation like 'parser.max_depth')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if not self._loaded:
            self.load_config()

        value: Any = self._config
        try:
            for k in key.split('.'):
                value = value[k]
        except (KeyError, TypeError):
            return default
        return deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value by key using dot notation.

        This modifies the in-memory configuration only.
        """
        if not self._loaded:
            self.load_config()

        keys = key.split('.')
        config = self._config
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        return self.get(key, _MISSING) is not _MISSING

    def reset(self) -> None:
        """Reset configuration state, forcing reload on next access."""
        self._config = {}
        self._loaded = False
