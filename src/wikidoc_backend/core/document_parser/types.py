"""
Document Parser Types

Core data structures produced by the markup tree parser. An Element is the
atomic parsed unit: either a text leaf or an ordered container of child
Elements, never both. A Document is the immutable result of one parse call.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union


class ElementKind(Enum):
    """Closed set of element kinds a parse can produce."""
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TABLE = "table"
    TABLE_ROW = "table-row"
    TABLE_CELL = "table-cell"
    LIST = "list"
    LIST_ITEM = "list-item"
    LINK = "link"
    IMAGE = "image"
    EMPHASIS = "emphasis"
    MACRO = "macro"
    CODE = "code"
    TEXT = "text"
    CONTAINER = "container"
    UNKNOWN = "unknown"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


# Kinds that may appear as children of a paragraph.
INLINE_KINDS = frozenset({
    ElementKind.TEXT,
    ElementKind.LINK,
    ElementKind.IMAGE,
    ElementKind.EMPHASIS,
    ElementKind.CODE,
    ElementKind.MACRO,
    ElementKind.CONTAINER,
    ElementKind.UNKNOWN,
    ElementKind.ERROR,
})


def merge_attributes(
    source: Optional[Mapping[str, Any]] = None,
    derived: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """
    Build an attribute map from source markup attributes and derived keys.

    Source keys are copied verbatim in their original order; derived keys
    are applied afterwards and win on collision. Every value is stored as a
    string. Multi-valued source attributes (bs4 returns ``class`` as a list)
    are joined with single spaces.
    """
    merged: Dict[str, str] = {}
    for mapping in (source or {}, derived or {}):
        for key, value in mapping.items():
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                value = " ".join(str(v) for v in value)
            elif isinstance(value, bool):
                value = "true" if value else "false"
            merged[str(key)] = str(value)
    return merged


@dataclass(frozen=True)
class Element:
    """
    A single parsed element.

    Leaves carry ``text`` (possibly empty) and no children. Containers carry
    ``children`` and ``text is None``; their textual content is reached by
    traversal. ``attributes`` is a read-only ordered mapping of strings.
    """
    kind: ElementKind
    text: Optional[str] = None
    children: Tuple["Element", ...] = ()
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if not isinstance(self.kind, ElementKind):
            raise ValueError(f"kind must be an ElementKind, got {type(self.kind)}")

        children = tuple(self.children)
        for child in children:
            if not isinstance(child, Element):
                raise ValueError(f"children must be Elements, got {type(child)}")
        if self.text is not None:
            if not isinstance(self.text, str):
                raise ValueError(f"text must be a string, got {type(self.text)}")
            if children:
                raise ValueError("an element cannot carry both text and children")

        object.__setattr__(self, "children", children)
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", MappingProxyType(merge_attributes(self.attributes)))

    @classmethod
    def leaf(
        cls,
        kind: ElementKind,
        text: str,
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> "Element":
        """Create a text leaf."""
        return cls(kind=kind, text=text, attributes=merge_attributes(attributes))

    @classmethod
    def container(
        cls,
        kind: ElementKind,
        children: Iterable["Element"],
        attributes: Optional[Mapping[str, Any]] = None,
    ) -> "Element":
        """Create a container of child elements."""
        return cls(kind=kind, text=None, children=tuple(children), attributes=merge_attributes(attributes))

    @property
    def is_leaf(self) -> bool:
        return self.text is not None

    @property
    def is_container(self) -> bool:
        return self.text is None

    @property
    def content(self) -> Union[str, Tuple["Element", ...]]:
        """The leaf text, or the child tuple for containers."""
        return self.text if self.text is not None else self.children

    @property
    def level(self) -> Optional[int]:
        """Heading level (1-6) for headings, otherwise None."""
        if self.kind is not ElementKind.HEADING:
            return None
        try:
            return int(self.attributes.get("level", ""))
        except ValueError:
            return None

    @property
    def name(self) -> Optional[str]:
        """Macro name for elements produced by a macro handler."""
        return self.attributes.get("name")

    def iter(self) -> Iterator["Element"]:
        """Yield this element and all descendants depth-first, pre-order."""
        stack = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def plain_text(self, separator: str = " ") -> str:
        """Leaf text of this element and its descendants, non-empty parts joined."""
        if self.text is not None:
            return self.text
        parts = [element.text for element in self.iter() if element.text]
        return separator.join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to dictionary representation."""
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "attributes": dict(self.attributes),
        }
        if self.text is not None:
            result["text"] = self.text
        else:
            result["children"] = [child.to_dict() for child in self.children]
        return result


def iter_elements(elements: Iterable[Element]) -> Iterator[Element]:
    """Yield every element of a sequence and its descendants in document order."""
    for element in elements:
        yield from element.iter()


@dataclass(frozen=True)
class Document:
    """
    The result of parsing one page of storage-format markup.

    ``title`` is supplied by the caller; ``elements`` holds the top-level
    elements in document order. Documents are never mutated after parsing.
    """
    title: str
    elements: Tuple[Element, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "elements", tuple(self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self.elements)

    def find_by_kind(self, *kinds: ElementKind) -> List[Element]:
        """All elements of the given kinds at any depth, in document order."""
        wanted = frozenset(kinds)
        return [element for element in iter_elements(self.elements) if element.kind in wanted]

    def headings(self) -> List[Element]:
        return self.find_by_kind(ElementKind.HEADING)

    def paragraphs(self) -> List[Element]:
        return self.find_by_kind(ElementKind.PARAGRAPH)

    def tables(self) -> List[Element]:
        return self.find_by_kind(ElementKind.TABLE)

    def lists(self) -> List[Element]:
        return self.find_by_kind(ElementKind.LIST)

    def links(self) -> List[Element]:
        return self.find_by_kind(ElementKind.LINK)

    def images(self) -> List[Element]:
        return self.find_by_kind(ElementKind.IMAGE)

    def macros(self) -> List[Element]:
        return self.find_by_kind(ElementKind.MACRO)

    def errors(self) -> List[Element]:
        return self.find_by_kind(ElementKind.ERROR)

    def full_content(self) -> List[Element]:
        """The top-level element sequence."""
        return list(self.elements)

    @property
    def is_empty(self) -> bool:
        return not self.elements

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "title": self.title,
            "elements": [element.to_dict() for element in self.elements],
        }
