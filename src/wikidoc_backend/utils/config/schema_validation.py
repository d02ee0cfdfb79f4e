"""
Schema validation for configuration management.

Validates the merged configuration against the built-in JSON schema and turns
jsonschema failures into ConfigurationValidationError.
"""

import logging
from typing import Any, Dict, Optional

import jsonschema

from ...exceptions.config_exceptions import (
    ConfigurationError,
    ConfigurationValidationError,
)
from .defaults import CONFIG_SCHEMA


logger = logging.getLogger(__name__)


class SchemaValidator:
    """
    Schema validation for configuration management.

    Handles JSON schema validation and error reporting.
    """

    def __init__(self, schema: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize schema validator.

        Args:
            schema: JSON schema to validate against (default: built-in schema)
        """
        self.schema = schema if schema is not None else CONFIG_SCHEMA
        self.logger = logger

    def validate_config(
        self,
        config: Dict[str, Any],
        config_file: str = "unknown"
    ) -> bool:
        """
        Validate configuration against the schema.

        Args:
            config: Configuration dictionary to validate
            config_file: Configuration file name for error reporting

        Returns:
            True if validation passes

        Raises:
            ConfigurationValidationError: If validation fails
            ConfigurationError: If the schema itself is invalid
        """
        try:
            jsonschema.validate(config, self.schema)
        except jsonschema.ValidationError as e:
            validation_errors = [e.message]
            invalid_fields = []

            if e.absolute_path:
                invalid_fields.append(".".join(str(p) for p in e.absolute_path))

            for ctx_error in e.context or []:
                validation_errors.append(ctx_error.message)
                if ctx_error.absolute_path:
                    invalid_fields.append(".".join(str(p) for p in ctx_error.absolute_path))

            self.logger.error(f"Configuration validation failed: {e.message}")
            raise ConfigurationValidationError(
                f"Configuration validation failed: {e.message}",
                config_file,
                validation_errors,
                invalid_fields
            ) from e
        except jsonschema.SchemaError as e:
            raise ConfigurationError(f"Invalid JSON schema: {e.message}") from e

        return True
