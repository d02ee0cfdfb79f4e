"""
Exceptions raised by markup sources.

A markup source is the collaborator that fetches raw storage-format markup
for a document identifier. Its failures never originate from the parsing
core.
"""

from typing import Optional

from .system_exceptions import (
    ErrorContext,
    ErrorRecoveryAction,
    ErrorSeverity,
    WikidocError,
)


class MarkupSourceError(WikidocError):
    """Raised when markup for a document cannot be retrieved."""
    __slots__ = ('_status_code', '_document_id')

    def __init__(
        self,
        message: str,
        document_id: Optional[str] = None,
        status_code: Optional[int] = None,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        actions = []
        if status_code in (401, 403):
            actions.append(ErrorRecoveryAction.UPDATE_CREDENTIALS)
        elif status_code is None or status_code == 429 or status_code >= 500:
            actions.extend([ErrorRecoveryAction.CHECK_NETWORK, ErrorRecoveryAction.RETRY_OPERATION])
        else:
            actions.append(ErrorRecoveryAction.CHECK_CONFIGURATION)

        context = ErrorContext(operation="fetch_markup", document_id=document_id)
        if status_code is not None:
            context.add_data("status_code", status_code)

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggested_actions=actions,
            original_exception=original_exception,
        )
        self._status_code = status_code
        self._document_id = document_id

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status code returned by the source, if any."""
        return self._status_code

    @property
    def document_id(self) -> Optional[str]:
        """Identifier of the document that failed to load."""
        return self._document_id


class DocumentNotFoundError(MarkupSourceError):
    """Raised when the source reports that a document does not exist."""
