"""
Configuration-related exceptions for wikidoc.

Raised while loading the JSON configuration file, applying environment
overrides and validating the merged result against the built-in schema.
"""

from typing import List, Optional

from .system_exceptions import (
    ErrorContext,
    ErrorRecoveryAction,
    ErrorSeverity,
    WikidocError,
)


class ConfigurationError(WikidocError):
    """Base exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_file: Configuration file path that caused the error
            suggestions: List of suggested fixes
        """
        context = ErrorContext(operation="load_config")
        if config_file:
            context.add_data("config_file", config_file)

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggested_actions=[ErrorRecoveryAction.CHECK_CONFIGURATION],
        )
        self.config_file = config_file
        self.suggestions = suggestions or []

    def __str__(self) -> str:
        """Return formatted error message with suggestions."""
        msg = self.message

        if self.config_file:
            msg = f"{msg}\nConfig file: {self.config_file}"

        if self.suggestions:
            msg += "\n\nSuggestions:"
            for i, suggestion in enumerate(self.suggestions, 1):
                msg += f"\n  {i}. {suggestion}"

        return msg


class ConfigurationFileNotFoundError(ConfigurationError):
    """Raised when an explicitly requested configuration file is missing."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        searched_paths: Optional[List[str]] = None
    ) -> None:
        suggestions = [
            "Check if the configuration file exists at the specified path",
            "Use an absolute path if the relative path is not resolved",
        ]

        if searched_paths:
            suggestions.append(f"Searched in: {', '.join(searched_paths)}")

        super().__init__(message, config_file, suggestions)
        self.searched_paths = searched_paths or []


class ConfigurationValidationError(ConfigurationError):
    """Raised when the merged configuration does not satisfy the schema."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        invalid_fields: Optional[List[str]] = None
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error description
            config_file: Configuration file with validation errors
            validation_errors: Specific validation error messages
            invalid_fields: Dotted names of the fields that failed validation
        """
        suggestions = [
            "Validate JSON syntax using a JSON validator",
            "Compare with the wikidoc.config.json shipped with the project",
        ]

        if invalid_fields:
            suggestions.append(f"Fix these fields: {', '.join(invalid_fields)}")

        super().__init__(message, config_file, suggestions)
        self.validation_errors = validation_errors or []
        self.invalid_fields = invalid_fields or []

    def __str__(self) -> str:
        """Return formatted validation error with details."""
        msg = super().__str__()

        if self.validation_errors:
            msg += "\n\nValidation errors:"
            for i, error in enumerate(self.validation_errors, 1):
                msg += f"\n  {i}. {error}"

        return msg


class EnvironmentVariableError(ConfigurationError):
    """Raised when an environment override cannot be applied."""

    def __init__(
        self,
        message: str,
        variable_name: Optional[str] = None,
    ) -> None:
        suggestions = [
            "Check the variable in your .env file or shell environment",
        ]

        if variable_name:
            suggestions.append(f"Unset or correct {variable_name}")

        super().__init__(message, None, suggestions)
        self.variable_name = variable_name
