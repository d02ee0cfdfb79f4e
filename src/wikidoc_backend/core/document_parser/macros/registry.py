"""
Macro Dispatch Registry

Ordered registry of macro handlers. The first handler whose name predicate
matches a macro wins; the generic handler catches everything else.
"""

import logging
from typing import List, Optional

from bs4.element import Tag

from ..types import Element
from .handlers import (
    BodyParser,
    GenericMacroHandler,
    MacroContext,
    MacroHandler,
    default_handlers,
    extract_parameters,
    macro_name_of,
)

logger = logging.getLogger(__name__)


class MacroRegistry:
    """Registry for macro handlers."""

    def __init__(self, handlers: Optional[List[MacroHandler]] = None, fallback: Optional[MacroHandler] = None):
        """
        Initialize the registry.

        Args:
            handlers: Handlers in dispatch order (default: the built-in set)
            fallback: Handler used when no other handler matches
        """
        self._handlers: List[MacroHandler] = []
        self._fallback = fallback or GenericMacroHandler()
        if handlers is None:
            self._register_default_handlers()
        else:
            for handler in handlers:
                self.register(handler)

    def _register_default_handlers(self) -> None:
        for handler in default_handlers():
            self.register(handler)

    def register(self, handler: MacroHandler, index: Optional[int] = None) -> None:
        """
        Register a handler.

        A handler with the same name is replaced in place. Otherwise the
        handler is appended, or inserted at ``index`` to take precedence over
        later handlers.
        """
        for position, existing in enumerate(self._handlers):
            if existing.name == handler.name:
                self._handlers[position] = handler
                logger.debug(f"Replaced macro handler '{handler.name}'")
                return

        if index is None:
            self._handlers.append(handler)
        else:
            self._handlers.insert(index, handler)

    def unregister(self, name: str) -> bool:
        """Remove the handler called ``name``. Returns False if there was none."""
        for position, existing in enumerate(self._handlers):
            if existing.name == name:
                del self._handlers[position]
                return True
        return False

    def has(self, macro_name: str) -> bool:
        """Check if a dedicated (non-fallback) handler matches ``macro_name``."""
        return any(handler.matches(macro_name) for handler in self._handlers)

    def get_handler(self, macro_name: str) -> MacroHandler:
        """The handler that would process ``macro_name``."""
        for handler in self._handlers:
            if handler.matches(macro_name):
                return handler
        return self._fallback

    def handler_names(self) -> List[str]:
        """Names of the registered handlers in dispatch order."""
        return [handler.name for handler in self._handlers]

    def handle(self, node: Tag, parse_body: Optional[BodyParser] = None) -> Element:
        """
        Turn a macro node into an Element.

        Args:
            node: An ``ac:structured-macro`` or ``ac:macro`` tag
            parse_body: Callback parsing a rich-text body into child elements

        Raises:
            MacroHandlerError: If the macro carries unusable parameters
        """
        name = macro_name_of(node)
        context = MacroContext(
            node=node,
            name=name,
            parameters=extract_parameters(node),
            parse_body=parse_body,
        )
        handler = self.get_handler(name)
        logger.debug(f"Dispatching macro '{name}' to {handler!r}")
        return handler.handle(context)
