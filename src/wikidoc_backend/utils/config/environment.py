"""
Environment variable handling for configuration management.

Maps WIKIDOC_* environment variables onto dotted configuration keys and
converts their string values to the type the schema expects.
"""

import logging
import os
from copy import deepcopy
from typing import Any, Dict, Tuple

from ...exceptions.config_exceptions import EnvironmentVariableError


logger = logging.getLogger(__name__)


class EnvironmentHandler:
    """
    Environment variable handling for configuration management.

    Handles environment variable overrides and type conversion.
    """

    def __init__(self) -> None:
        """Initialize environment handler."""
        self.logger = logger

    def get_env_mapping(self) -> Dict[str, Tuple[str, str]]:
        """
        Get mapping of environment variable names to configuration keys.

        Returns:
            Dictionary mapping env var names to (config key, target type)
        """
        return {
            'WIKIDOC_LOG_LEVEL': ('logging.level', 'upper'),
            'WIKIDOC_LOG_FORMAT': ('logging.format', 'lower'),
            'WIKIDOC_LOG_FILE': ('logging.file', 'string'),
            'WIKIDOC_MAX_DEPTH': ('parser.max_depth', 'integer'),
            'WIKIDOC_PARSER_FEATURES': ('parser.features', 'string'),
            'WIKIDOC_SUMMARY_MAX_LENGTH': ('extraction.summary_max_length', 'integer'),
            'WIKIDOC_BASE_URL': ('source.base_url', 'string'),
            'WIKIDOC_API_TOKEN': ('source.api_token', 'string'),
            'WIKIDOC_TIMEOUT': ('source.timeout', 'float'),
        }

    def convert_env_value(self, value: str, target_type: str = 'string') -> Any:
        """
        Convert environment variable string to appropriate Python type.

        Args:
            value: Environment variable value (always string)
            target_type: One of 'string', 'upper', 'lower', 'boolean',
                'integer' or 'float'

        Returns:
            Converted value, or None for an empty string

        Raises:
            EnvironmentVariableError: If conversion fails
        """
        value = value.strip()
        if not value:
            return None

        try:
            if target_type == 'boolean':
                return value.lower() in ('true', '1', 'yes', 'on', 'enabled')
            elif target_type == 'integer':
                return int(value)
            elif target_type == 'float':
                return float(value)
            elif target_type == 'upper':
                return value.upper()
            elif target_type == 'lower':
                return value.lower()
            return value
        except ValueError as e:
            raise EnvironmentVariableError(
                f"Failed to convert environment variable value '{value}' to {target_type}: {e}"
            ) from e

    def apply_environment_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply environment variable overrides to configuration.

        Args:
            config: Base configuration dictionary

        Returns:
            New configuration dictionary with overrides applied

        Raises:
            EnvironmentVariableError: If a set variable has an unusable value
        """
        result = deepcopy(config)

        for env_var, (config_key, target_type) in self.get_env_mapping().items():
            env_value = os.getenv(env_var)
            if env_value is None:
                continue

            try:
                converted_value = self.convert_env_value(env_value, target_type)
            except EnvironmentVariableError as e:
                raise EnvironmentVariableError(str(e.message), env_var) from e

            if converted_value is None:
                continue
            self._set_nested_value(result, config_key, converted_value)
            self.logger.debug(f"Applied environment override: {env_var} -> {config_key}")

        return result

    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: Any) -> None:
        """Set a nested value in configuration using dot notation."""
        keys = key_path.split('.')
        current = config

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value
