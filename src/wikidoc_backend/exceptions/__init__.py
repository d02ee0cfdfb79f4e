"""
Exceptions package for wikidoc.

This package contains the exception classes raised by the parser, the macro
handlers, the markup sources and the configuration system.
"""

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
)

from .parse_exceptions import (
    MacroHandlerError,
    ParseError,
)

from .source_exceptions import (
    DocumentNotFoundError,
    MarkupSourceError,
)

from .system_exceptions import (
    WikidocError,
    ErrorSeverity,
    ErrorContext,
    ErrorRecoveryAction,
)

__all__ = [
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    "MacroHandlerError",
    "ParseError",
    "DocumentNotFoundError",
    "MarkupSourceError",
    "WikidocError",
    "ErrorSeverity",
    "ErrorContext",
    "ErrorRecoveryAction",
]
