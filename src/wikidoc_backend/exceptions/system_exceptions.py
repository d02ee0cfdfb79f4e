"""
System-wide exception classes for wikidoc.

This module defines the base error type shared by every wikidoc component,
with severity levels, context preservation and recovery action suggestions.
"""

import uuid
from datetime import datetime
from enum import Enum
from functools import total_ordering
from typing import Dict, Any, List, Optional, Union


@total_ordering
class ErrorSeverity(Enum):
    """Error severity levels with ordering support."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    def __lt__(self, other):
        """Enable ordering of severity levels."""
        if not isinstance(other, ErrorSeverity):
            return NotImplemented

        order = {
            ErrorSeverity.LOW: 1,
            ErrorSeverity.MEDIUM: 2,
            ErrorSeverity.HIGH: 3,
            ErrorSeverity.CRITICAL: 4
        }
        return order[self] < order[other]


class ErrorRecoveryAction(Enum):
    """Recovery action suggestions for different error types."""
    CHECK_CONFIGURATION = "Check configuration file for missing or invalid settings"
    CHECK_MARKUP = "Check the storage-format markup for unterminated or malformed tags"
    REDUCE_NESTING = "Reduce the nesting depth of the markup or raise parser.max_depth"
    RETRY_OPERATION = "Retry the operation after a brief delay"
    CHECK_NETWORK = "Check network connectivity and endpoint availability"
    UPDATE_CREDENTIALS = "Update or refresh authentication credentials"
    CONTACT_SUPPORT = "Contact system administrator or support team"

    def __str__(self):
        return self.value


class ErrorContext:
    """
    Error context information with selective metadata capture.
    """
    __slots__ = ('operation', 'document_id', 'request_id', '_additional_data')

    def __init__(
        self,
        operation: str,
        document_id: Optional[str] = None,
        request_id: Optional[str] = None,
        additional_data: Optional[Dict[str, Any]] = None
    ):
        self.operation = operation
        self.document_id = document_id
        self.request_id = request_id
        self._additional_data = additional_data or {}

    @property
    def additional_data(self) -> Dict[str, Any]:
        """Get additional data dictionary."""
        return self._additional_data

    def add_data(self, key: str, value: Any) -> None:
        """Attach a piece of diagnostic data to the context."""
        self._additional_data[key] = value

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary representation."""
        result = {
            "operation": self.operation,
        }

        if self.document_id is not None:
            result["document_id"] = self.document_id
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self._additional_data:
            result["additional_data"] = dict(self._additional_data)

        return result


class WikidocError(Exception):
    """
    Base exception class for wikidoc.

    Carries a severity, an ErrorContext describing the failing operation and a
    list of suggested recovery actions. Identifiers and timestamps are created
    lazily since most errors are never serialized.
    """
    __slots__ = (
        '_message', '_severity', '_context', '_suggested_actions',
        '_timestamp', '_error_id', '_original_exception'
    )

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[Union[ErrorContext, Dict[str, Any]]] = None,
        suggested_actions: Optional[List[ErrorRecoveryAction]] = None,
        original_exception: Optional[BaseException] = None
    ):
        super().__init__(message)
        self._message = message
        self._severity = severity
        self._original_exception = original_exception

        if isinstance(context, dict):
            self._context = ErrorContext(
                operation=context.get('operation', 'unknown'),
                document_id=context.get('document_id'),
                request_id=context.get('request_id'),
                additional_data=context.get('additional_data', {})
            )
        else:
            self._context = context or ErrorContext(operation="unknown")

        self._suggested_actions = list(suggested_actions or [])
        self._timestamp = None
        self._error_id = None

    @property
    def message(self) -> str:
        """Get error message."""
        return self._message

    @property
    def severity(self) -> ErrorSeverity:
        """Get error severity."""
        return self._severity

    @property
    def context(self) -> ErrorContext:
        """Get error context."""
        return self._context

    @property
    def suggested_actions(self) -> List[ErrorRecoveryAction]:
        """Get suggested recovery actions."""
        return self._suggested_actions

    @property
    def original_exception(self) -> Optional[BaseException]:
        """Get original exception if available."""
        return self._original_exception

    @property
    def timestamp(self) -> datetime:
        """Get error timestamp (lazy evaluation)."""
        if self._timestamp is None:
            self._timestamp = datetime.now()
        return self._timestamp

    @property
    def error_id(self) -> str:
        """Get unique error ID (lazy evaluation)."""
        if self._error_id is None:
            self._error_id = str(uuid.uuid4())
        return self._error_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "error_id": self.error_id,
            "error_type": type(self).__name__,
            "message": self._message,
            "severity": self._severity.value,
            "timestamp": self.timestamp.isoformat(),
            "context": self._context.to_dict(),
            "suggested_actions": [str(action) for action in self._suggested_actions]
        }

        if self._original_exception is not None:
            result["original_exception"] = str(self._original_exception)

        return result

    def __str__(self) -> str:
        """String representation of the error."""
        return self._message
