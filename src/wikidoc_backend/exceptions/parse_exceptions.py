"""
Parsing-related exceptions for wikidoc.

ParseError is the only parsing failure that ever reaches a caller: it signals
that the markup could not be tokenized at all or that the nesting depth limit
was exceeded. Everything below the document level degrades into error
elements instead of raising.
"""

from typing import Optional

from .system_exceptions import (
    ErrorContext,
    ErrorRecoveryAction,
    ErrorSeverity,
    WikidocError,
)


class ParseError(WikidocError):
    """Raised when storage-format markup cannot be turned into a Document."""
    __slots__ = ('_tag', '_depth', '_position')

    def __init__(
        self,
        message: str,
        tag: Optional[str] = None,
        depth: Optional[int] = None,
        position: Optional[int] = None,
        original_exception: Optional[BaseException] = None,
    ) -> None:
        """
        Initialize a parse error.

        Args:
            message: Human-readable error description
            tag: Name of the tag being processed when parsing failed
            depth: Nesting depth reached when parsing failed
            position: Character offset in the markup, when known
            original_exception: Underlying tokenizer exception, if any
        """
        context = ErrorContext(operation="parse_markup")
        if tag is not None:
            context.add_data("tag", tag)
        if depth is not None:
            context.add_data("depth", depth)
        if position is not None:
            context.add_data("position", position)

        actions = [ErrorRecoveryAction.CHECK_MARKUP]
        if depth is not None:
            actions.append(ErrorRecoveryAction.REDUCE_NESTING)

        super().__init__(
            message,
            severity=ErrorSeverity.HIGH,
            context=context,
            suggested_actions=actions,
            original_exception=original_exception,
        )
        self._tag = tag
        self._depth = depth
        self._position = position

    @property
    def tag(self) -> Optional[str]:
        """Tag being processed when the error occurred."""
        return self._tag

    @property
    def depth(self) -> Optional[int]:
        """Nesting depth reached when the error occurred."""
        return self._depth

    @property
    def position(self) -> Optional[int]:
        """Character offset of the offending markup."""
        return self._position


class MacroHandlerError(WikidocError):
    """Raised by a macro handler when a macro carries unusable parameters."""
    __slots__ = ('_macro_name', '_parameter')

    def __init__(
        self,
        message: str,
        macro_name: str,
        parameter: Optional[str] = None,
    ) -> None:
        context = ErrorContext(operation="handle_macro")
        context.add_data("macro_name", macro_name)
        if parameter is not None:
            context.add_data("parameter", parameter)

        super().__init__(
            message,
            severity=ErrorSeverity.LOW,
            context=context,
            suggested_actions=[ErrorRecoveryAction.CHECK_MARKUP],
        )
        self._macro_name = macro_name
        self._parameter = parameter

    @property
    def macro_name(self) -> str:
        """Name of the macro whose handler failed."""
        return self._macro_name

    @property
    def parameter(self) -> Optional[str]:
        """Parameter that could not be interpreted."""
        return self._parameter
