"""
Markup Tree Parser

Converts wiki storage-format markup (XHTML plus ``ac:``/``ri:`` macro tags)
into a Document of typed Elements.

The markup is tokenized with BeautifulSoup and walked depth-first. Each tag
is dispatched on its name to a builder for one ElementKind; macro tags are
handed to the MacroRegistry. A failure while building a single element is
isolated: the element is replaced by an ``error`` Element and parsing of its
siblings continues. Only a document that cannot be tokenized, or whose
nesting exceeds ``max_depth``, raises ParseError.

Usage:
    >>> parser = MarkupTreeParser()
    >>> document = parser.parse("<h1>Intro</h1><p>Hello</p>", title="Page")
    >>> [element.kind.value for element in document.elements]
    ['heading', 'paragraph']
"""

import html
import logging
import re
from typing import Any, Dict, List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from ...exceptions.parse_exceptions import ParseError
from ...utils.config.settings import ParserSettings
from .macros.registry import MacroRegistry
from .markup_utils import (
    IGNORED_STRING_TYPES,
    child_tags,
    collect_text,
    has_child_tags,
    normalize_whitespace,
    source_attributes,
    tag_name,
)
from .types import INLINE_KINDS, Document, Element, ElementKind, merge_attributes

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100
DEFAULT_FEATURES = "html.parser"

HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
LIST_TAGS = frozenset({"ul", "ol"})
MACRO_TAGS = frozenset({"ac:structured-macro", "ac:macro"})
TABLE_SECTION_TAGS = frozenset({"thead", "tbody", "tfoot"})
CELL_TAGS = frozenset({"td", "th"})
DROPPED_TAGS = frozenset({"br", "hr", "wbr", "colgroup", "col", "ac:parameter", "ac:default-parameter"})

# Inline kinds whose children are themselves restricted to inline kinds.
NESTED_INLINE_KINDS = frozenset({ElementKind.CONTAINER, ElementKind.EMPHASIS})

EMPHASIS_STYLES = {
    "strong": "bold",
    "b": "bold",
    "em": "italic",
    "i": "italic",
    "u": "underline",
    "s": "strike",
    "del": "strike",
    "strike": "strike",
    "code": "code",
    "tt": "code",
    "sub": "subscript",
    "sup": "superscript",
}

CDATA_PATTERN = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)
# A "<" followed by a tag-start character with no closing ">" before the end.
UNTERMINATED_TAG_PATTERN = re.compile(r"<[A-Za-z!/?][^<>]*$")


def _escape_cdata(markup: str) -> str:
    """Replace CDATA sections with their escaped text so every tree builder keeps them."""
    return CDATA_PATTERN.sub(lambda match: html.escape(match.group(1), quote=False), markup)


def restrict_to_inline(elements: List[Element]) -> List[Element]:
    """
    Keep paragraph content inline.

    Elements of inline kinds are kept (generic containers and emphasis are
    filtered recursively); block-level elements such as tables, lists or
    headings nested in a paragraph are unwrapped into a ``text`` leaf of
    their plain text, or dropped when they have none.
    """
    restricted: List[Element] = []
    for element in elements:
        if element.kind not in INLINE_KINDS:
            text = element.plain_text()
            if text:
                restricted.append(Element.leaf(ElementKind.TEXT, text))
        elif element.is_container and element.kind in NESTED_INLINE_KINDS:
            children = restrict_to_inline(list(element.children))
            if children:
                restricted.append(Element.container(element.kind, children, element.attributes))
        else:
            restricted.append(element)
    return restricted


class MarkupTreeParser:
    """
    Parser from storage-format markup to a Document.

    Instances hold only configuration and may be shared across threads;
    every parse call works on its own tree.
    """

    def __init__(
        self,
        registry: Optional[MacroRegistry] = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        features: str = DEFAULT_FEATURES,
    ) -> None:
        """
        Initialize the parser.

        Args:
            registry: Macro registry (default: the built-in handler set)
            max_depth: Maximum tag nesting depth before ParseError is raised
            features: BeautifulSoup tree builder to tokenize with
        """
        if max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth}")
        self.registry = registry or MacroRegistry()
        self.max_depth = max_depth
        self.features = features

    @classmethod
    def from_settings(cls, settings: ParserSettings, registry: Optional[MacroRegistry] = None) -> "MarkupTreeParser":
        """Build a parser from a ParserSettings instance."""
        return cls(registry=registry, max_depth=settings.max_depth, features=settings.features)

    def parse(self, markup: str, title: str = "") -> Document:
        """
        Parse storage-format markup into a Document.

        Args:
            markup: The page markup, usually a body-less fragment
            title: Document title supplied by the caller

        Returns:
            The parsed Document (empty if the markup has no content)

        Raises:
            ParseError: If the markup cannot be tokenized or nests too deeply
        """
        if not isinstance(markup, str):
            raise ParseError(f"markup must be a string, got {type(markup).__name__}")

        if not markup.strip():
            logger.warning(f"Empty markup for document '{title}'", extra={"document_title": title})
            return Document(title=title)

        root = self._tokenize(markup)
        elements = self._parse_children(root, depth=1)

        if not elements:
            logger.warning(f"No content found in document '{title}'", extra={"document_title": title})
        else:
            logger.debug(f"Parsed document '{title}' into {len(elements)} top-level elements")

        return Document(title=title, elements=tuple(elements))

    def _tokenize(self, markup: str) -> Tag:
        """Build the node tree and return the root container (body if present)."""
        prepared = _escape_cdata(markup)

        dangling = UNTERMINATED_TAG_PATTERN.search(prepared.rstrip())
        if dangling is not None:
            raise ParseError(
                f"Unterminated tag at end of markup: {dangling.group(0)[:40]!r}",
                position=dangling.start(),
            )

        try:
            soup = BeautifulSoup(prepared, self.features)
        except Exception as e:
            raise ParseError(
                f"Markup could not be tokenized: {e}",
                original_exception=e,
            ) from e

        body = soup.find("body")
        return body if body is not None else soup

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _parse_children(self, node: Tag, depth: int) -> List[Element]:
        elements: List[Element] = []
        for child in node.children:
            element = self._parse_node(child, depth)
            if element is not None:
                elements.append(element)
        return elements

    def _parse_node(self, node: PageElement, depth: int) -> Optional[Element]:
        """Parse one node, isolating any failure into an error element."""
        if isinstance(node, NavigableString):
            if isinstance(node, IGNORED_STRING_TYPES):
                return None
            text = normalize_whitespace(str(node))
            return Element.leaf(ElementKind.TEXT, text) if text else None

        if not isinstance(node, Tag):
            return None

        name = tag_name(node)
        if depth > self.max_depth:
            raise ParseError(
                f"Maximum nesting depth {self.max_depth} exceeded at <{name}>",
                tag=name,
                depth=depth,
            )

        try:
            return self._dispatch(node, name, depth)
        except ParseError:
            raise
        except RecursionError as e:
            raise ParseError(
                f"Nesting too deep to parse at <{name}>",
                tag=name,
                depth=depth,
                original_exception=e,
            ) from e
        except Exception as e:
            logger.warning(
                f"Failed to parse <{name}> element: {e}",
                extra={"tag": name, "exception_type": type(e).__name__, "depth": depth},
            )
            return Element.leaf(
                ElementKind.ERROR,
                "",
                {"message": str(e), "tag": name, "exceptionType": type(e).__name__},
            )

    def _dispatch(self, node: Tag, name: str, depth: int) -> Optional[Element]:
        if name in HEADING_TAGS:
            return self._parse_heading(node, name)
        if name == "p":
            return self._parse_paragraph(node, depth)
        if name == "table":
            return self._parse_table(node, depth)
        if name in LIST_TAGS:
            return self._parse_list(node, name, depth)
        if name == "a":
            return self._parse_link(node)
        if name == "ac:link":
            return self._parse_resource_link(node)
        if name == "img":
            return self._parse_image(node)
        if name == "ac:image":
            return self._parse_resource_image(node)
        if name == "pre":
            return self._parse_preformatted(node)
        if name in MACRO_TAGS:
            return self.registry.handle(node, parse_body=lambda body: self._parse_children(body, depth + 1))
        if name in EMPHASIS_STYLES:
            return self._parse_emphasis(node, name, depth)
        if name in DROPPED_TAGS:
            return None
        return self._parse_generic(node, name, depth)

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------

    def _parse_heading(self, node: Tag, name: str) -> Element:
        return Element.leaf(
            ElementKind.HEADING,
            collect_text(node),
            merge_attributes(source_attributes(node), {"level": name[1]}),
        )

    def _parse_paragraph(self, node: Tag, depth: int) -> Optional[Element]:
        attributes = source_attributes(node)
        if has_child_tags(node):
            children = restrict_to_inline(self._parse_children(node, depth + 1))
            if children:
                return Element.container(ElementKind.PARAGRAPH, children, attributes)

        text = collect_text(node)
        if not text:
            return None
        return Element.leaf(ElementKind.PARAGRAPH, text, attributes)

    def _parse_emphasis(self, node: Tag, name: str, depth: int) -> Optional[Element]:
        attributes = merge_attributes(source_attributes(node), {"style": EMPHASIS_STYLES[name]})
        if has_child_tags(node):
            children = self._parse_children(node, depth + 1)
            if children:
                return Element.container(ElementKind.EMPHASIS, children, attributes)

        text = collect_text(node, preserve_whitespace=name in ("code", "tt"))
        if not text:
            return None
        return Element.leaf(ElementKind.EMPHASIS, text, attributes)

    def _parse_table(self, node: Tag, depth: int) -> Element:
        rows: List[Element] = []
        for row_node, in_header_section in self._table_rows(node):
            row = self._parse_table_row(row_node, in_header_section, depth + 1)
            if row is not None:
                rows.append(row)
        return Element.container(ElementKind.TABLE, rows, source_attributes(node))

    def _table_rows(self, table: Tag):
        """Rows of this table in document order, excluding rows of nested tables."""
        for child in child_tags(table):
            name = tag_name(child)
            if name == "tr":
                yield child, False
            elif name in TABLE_SECTION_TAGS:
                for row in child_tags(child, "tr"):
                    yield row, name == "thead"

    def _parse_table_row(self, row: Tag, in_header_section: bool, depth: int) -> Optional[Element]:
        if depth > self.max_depth:
            raise ParseError(f"Maximum nesting depth {self.max_depth} exceeded at <tr>", tag="tr", depth=depth)

        cell_nodes = child_tags(row, *CELL_TAGS)
        if not cell_nodes:
            return None

        is_header = in_header_section or all(tag_name(cell) == "th" for cell in cell_nodes)
        cells = [self._parse_table_cell(cell, depth + 1) for cell in cell_nodes]

        derived: Dict[str, str] = {"isHeader": "true"} if is_header else {}
        return Element.container(
            ElementKind.TABLE_ROW,
            cells,
            merge_attributes(source_attributes(row), derived),
        )

    def _parse_table_cell(self, cell: Tag, depth: int) -> Element:
        if depth > self.max_depth:
            raise ParseError(f"Maximum nesting depth {self.max_depth} exceeded at <td>", tag="td", depth=depth)

        attributes = merge_attributes(
            source_attributes(cell),
            {"cellType": "header" if tag_name(cell) == "th" else "data"},
        )
        if has_child_tags(cell):
            children = self._parse_children(cell, depth + 1)
            if children:
                return Element.container(ElementKind.TABLE_CELL, children, attributes)
        return Element.leaf(ElementKind.TABLE_CELL, collect_text(cell), attributes)

    def _parse_list(self, node: Tag, name: str, depth: int) -> Element:
        items = [self._parse_list_item(item, depth + 1) for item in child_tags(node, "li")]
        return Element.container(
            ElementKind.LIST,
            items,
            merge_attributes(source_attributes(node), {"ordered": name == "ol"}),
        )

    def _parse_list_item(self, item: Tag, depth: int) -> Element:
        """
        A list item is a text leaf unless it holds a nested list.

        With nested lists the item becomes a container: a text element with
        the item's own text (nested lists stripped), then each nested list.
        """
        if depth > self.max_depth:
            raise ParseError(f"Maximum nesting depth {self.max_depth} exceeded at <li>", tag="li", depth=depth)

        attributes = source_attributes(item)
        nested = child_tags(item, *LIST_TAGS)
        if not nested:
            return Element.leaf(ElementKind.LIST_ITEM, collect_text(item), attributes)

        nested_ids = {id(node) for node in nested}
        own_text = collect_text(item, skip=lambda tag: id(tag) in nested_ids)

        children: List[Element] = []
        if own_text:
            children.append(Element.leaf(ElementKind.TEXT, own_text))
        for nested_list in nested:
            element = self._parse_node(nested_list, depth + 1)
            if element is not None:
                children.append(element)
        return Element.container(ElementKind.LIST_ITEM, children, attributes)

    def _parse_link(self, node: Tag) -> Element:
        attributes = source_attributes(node)
        attributes.setdefault("href", "")
        return Element.leaf(ElementKind.LINK, collect_text(node), attributes)

    def _parse_resource_link(self, node: Tag) -> Element:
        """``ac:link``: a link to a page, attachment, user or anchor."""
        attributes = source_attributes(node)
        resource = self._resource_of(node)
        derived: Dict[str, str] = {}
        fallback_text = ""

        if resource is not None:
            attributes.update(source_attributes(resource))
            resource_type = tag_name(resource)[len("ri:"):]
            derived["resourceType"] = resource_type
            fallback_text = (
                resource.get("ri:content-title")
                or resource.get("ri:filename")
                or resource.get("ri:value")
                or ""
            )
            if resource_type == "url":
                derived["href"] = resource.get("ri:value", "")

        anchor = node.get("ac:anchor")
        if "href" not in derived:
            derived["href"] = f"#{anchor}" if anchor else ""

        body = None
        for body_name in ("ac:plain-text-link-body", "ac:link-body"):
            body = next(iter(child_tags(node, body_name)), None)
            if body is not None:
                break
        text = collect_text(body) if body is not None else ""

        return Element.leaf(
            ElementKind.LINK,
            text or normalize_whitespace(fallback_text) or (anchor or ""),
            merge_attributes(attributes, derived),
        )

    def _parse_image(self, node: Tag) -> Element:
        attributes = source_attributes(node)
        attributes.setdefault("src", "")
        attributes.setdefault("alt", "")
        return Element.leaf(ElementKind.IMAGE, normalize_whitespace(attributes["alt"]), attributes)

    def _parse_resource_image(self, node: Tag) -> Element:
        """``ac:image``: an attached or external image."""
        attributes = source_attributes(node)
        resource = self._resource_of(node)
        src = ""
        if resource is not None:
            attributes.update(source_attributes(resource))
            src = resource.get("ri:filename") or resource.get("ri:value") or ""

        alt = node.get("ac:alt") or node.get("ac:title") or ""
        return Element.leaf(
            ElementKind.IMAGE,
            normalize_whitespace(alt),
            merge_attributes(attributes, {"src": src, "alt": alt}),
        )

    def _parse_preformatted(self, node: Tag) -> Element:
        return Element.leaf(
            ElementKind.CODE,
            collect_text(node, preserve_whitespace=True),
            merge_attributes(source_attributes(node), {"isBlock": "true"}),
        )

    def _parse_generic(self, node: Tag, name: str, depth: int) -> Optional[Element]:
        """
        Any tag without a dedicated builder.

        A tag with element children becomes a container if at least one child
        parses; otherwise its text, if any, becomes an ``unknown`` leaf.
        """
        if has_child_tags(node):
            children = self._parse_children(node, depth + 1)
            if children:
                return Element.container(
                    ElementKind.CONTAINER,
                    children,
                    merge_attributes(source_attributes(node), {"tag": name}),
                )

        text = collect_text(node)
        if not text:
            return None
        return Element.leaf(
            ElementKind.UNKNOWN,
            text,
            merge_attributes(source_attributes(node), {"tag": name}),
        )

    @staticmethod
    def _resource_of(node: Tag) -> Optional[Tag]:
        for child in child_tags(node):
            if tag_name(child).startswith("ri:"):
                return child
        return None


def parse_document(markup: str, title: str = "", **kwargs: Any) -> Document:
    """Parse markup with a parser built from ``kwargs``."""
    return MarkupTreeParser(**kwargs).parse(markup, title)
