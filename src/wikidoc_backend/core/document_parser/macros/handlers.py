"""
Macro Handlers

One handler per recognized macro plus the generic fallback. A handler reads
the macro's parameters and body from a MacroContext and returns a single
Element; the registry decides which handler runs.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from bs4.element import Tag

from ..markup_utils import (
    child_tags,
    collect_text,
    first_child_tag,
    has_child_tags,
    normalize_whitespace,
    source_attributes,
)
from ..types import Element, ElementKind, merge_attributes
from .types import (
    CalloutParameters,
    CodeParameters,
    ExpandParameters,
    IssueReferenceParameters,
    MacroParameters,
    PanelParameters,
    RawParameters,
    StatusParameters,
    TocParameters,
)

logger = logging.getLogger(__name__)

BodyParser = Callable[[Tag], List[Element]]

RESOURCE_PREFIX = "ri:"


def macro_name_of(node: Tag) -> str:
    """The macro name as written in the markup (``ac:name``)."""
    return (node.get("ac:name") or "").strip()


def extract_parameters(node: Tag) -> Dict[str, str]:
    """
    Read a macro's parameters from its direct ``ac:parameter`` children.

    A parameter without text takes the first attribute value of a nested
    ``ri:*`` resource node (page, user or attachment references). The
    legacy ``ac:default-parameter`` is stored under ``default``.
    """
    params: Dict[str, str] = {}
    for param in child_tags(node, "ac:parameter"):
        name = (param.get("ac:name") or "").strip()
        if not name:
            continue
        value = collect_text(param)
        if not value:
            value = _resource_value(param)
        params[name] = value

    default_param = first_child_tag(node, "ac:default-parameter")
    if default_param is not None:
        params.setdefault("default", collect_text(default_param))
    return params


def _resource_value(param: Tag) -> str:
    for resource in param.find_all(True):
        if (resource.name or "").lower().startswith(RESOURCE_PREFIX) and resource.attrs:
            value = next(iter(resource.attrs.values()))
            return " ".join(value) if isinstance(value, list) else str(value)
    return ""


@dataclass
class MacroContext:
    """Everything a handler needs to turn one macro node into an Element."""
    node: Tag
    name: str
    parameters: Dict[str, str]
    parse_body: Optional[BodyParser] = None

    @property
    def source_attributes(self) -> Dict[str, str]:
        return source_attributes(self.node)

    @property
    def rich_text_body(self) -> Optional[Tag]:
        return first_child_tag(self.node, "ac:rich-text-body")

    @property
    def plain_text_body(self) -> Optional[Tag]:
        return first_child_tag(self.node, "ac:plain-text-body")

    def body_text(self) -> str:
        body = self.rich_text_body
        if body is None:
            body = self.plain_text_body
        return collect_text(body) if body is not None else ""

    def attributes(self, parameters: Dict[str, str], **derived: str) -> Dict[str, str]:
        """Source attributes, then parameters, then derived keys."""
        merged = merge_attributes(self.source_attributes, parameters)
        return merge_attributes(merged, derived)


class MacroHandler:
    """Base class for macro handlers."""

    name: str = ""
    aliases: Tuple[str, ...] = ()
    parameter_type = MacroParameters

    def matches(self, macro_name: str) -> bool:
        """Return True if this handler handles ``macro_name``."""
        macro_name = macro_name.lower()
        return macro_name == self.name or macro_name in self.aliases

    def parse_parameters(self, context: MacroContext) -> MacroParameters:
        return self.parameter_type.from_parameters(context.parameters)

    def handle(self, context: MacroContext) -> Element:
        raise NotImplementedError

    def _body_element(
        self,
        context: MacroContext,
        kind: ElementKind,
        attributes: Dict[str, str],
    ) -> Element:
        """
        Build the element for a macro with a rich-text body.

        The body is parsed into child elements when a body parser is
        available and the body has element children; otherwise the element
        is a text leaf holding the body text.
        """
        body = context.rich_text_body
        if body is not None and context.parse_body is not None and has_child_tags(body):
            children = context.parse_body(body)
            if children:
                return Element.container(kind, children, attributes)
        return Element.leaf(kind, context.body_text(), attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class CalloutMacroHandler(MacroHandler):
    """info, note and warning panels."""

    parameter_type = CalloutParameters

    def __init__(self, name: str):
        self.name = name

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return self._body_element(context, ElementKind.MACRO, attributes)


class CodeMacroHandler(MacroHandler):
    """code and noformat blocks, re-tagged as ``code`` elements."""

    name = "code"
    aliases = ("noformat",)
    parameter_type = CodeParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        body = context.plain_text_body
        if body is None:
            body = context.rich_text_body
        text = collect_text(body, preserve_whitespace=True) if body is not None else ""

        attributes = context.attributes(
            params.to_attributes(),
            name=context.name.lower(),
            isBlock="true",
        )
        return Element.leaf(ElementKind.CODE, text, attributes)


class TocMacroHandler(MacroHandler):
    """Table-of-contents placeholder; the levels are validated integers."""

    name = "toc"
    parameter_type = TocParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return Element.leaf(ElementKind.MACRO, "", attributes)


class StatusMacroHandler(MacroHandler):
    name = "status"
    parameter_type = StatusParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        text = params.title or context.body_text()
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return Element.leaf(ElementKind.MACRO, normalize_whitespace(text), attributes)


class ExpandMacroHandler(MacroHandler):
    name = "expand"
    parameter_type = ExpandParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return self._body_element(context, ElementKind.MACRO, attributes)


class PanelMacroHandler(MacroHandler):
    name = "panel"
    parameter_type = PanelParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return self._body_element(context, ElementKind.MACRO, attributes)


class IssueReferenceMacroHandler(MacroHandler):
    """
    External issue reference (``jira``).

    Either a single issue ``key`` or a ``jqlQuery``; the element text is the
    key when present, else the query.
    """

    name = "jira"
    parameter_type = IssueReferenceParameters

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        text = params.key or params.jql_query
        attributes = context.attributes(params.to_attributes(), name=self.name)
        return Element.leaf(ElementKind.MACRO, text, attributes)


class GenericMacroHandler(MacroHandler):
    """
    Fallback for macros without a dedicated handler.

    Produces a ``macro`` element carrying the raw macro name and the full
    parameter map, so no macro is ever dropped.
    """

    name = "*"

    def matches(self, macro_name: str) -> bool:
        return True

    def parse_parameters(self, context: MacroContext) -> RawParameters:
        return RawParameters(name=context.name, values=context.parameters)

    def handle(self, context: MacroContext) -> Element:
        params = self.parse_parameters(context)
        attributes = context.attributes(params.to_attributes(), name=context.name)
        if context.rich_text_body is None and context.plain_text_body is not None:
            text = collect_text(context.plain_text_body, preserve_whitespace=True)
            return Element.leaf(ElementKind.MACRO, text, attributes)
        return self._body_element(context, ElementKind.MACRO, attributes)


def default_handlers() -> List[MacroHandler]:
    """The built-in handlers in registration order."""
    return [
        CalloutMacroHandler("info"),
        CalloutMacroHandler("note"),
        CalloutMacroHandler("warning"),
        CodeMacroHandler(),
        TocMacroHandler(),
        StatusMacroHandler(),
        ExpandMacroHandler(),
        PanelMacroHandler(),
        IssueReferenceMacroHandler(),
    ]
