"""
Structure Analyzer

Reconstructs the implicit section hierarchy of a Document from its flat
heading sequence.

The element sequence is first turned into an outline stream: top-level
elements in order, with every container that holds a heading expanded in
place. Every heading then opens a section owning the elements up to the next
heading of any level. Sections are nested with an explicit stack of
(level, section) pairs: entries at the same or a deeper level are popped
before a heading is attached to whatever remains on top, so skipped levels
nest one deep and a shallower heading without an ancestor becomes
top-level.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from ..types import Document, Element, ElementKind
from .section import (
    SYNTHETIC_ROOT_ID,
    SYNTHETIC_ROOT_LEVEL,
    SYNTHETIC_ROOT_TITLE,
    Section,
    slugify,
)

logger = logging.getLogger(__name__)

AnalyzerInput = Union[Document, Iterable[Element]]


@dataclass
class _SectionBuilder:
    heading: Element
    section_id: str
    title: str
    level: int
    content: List[Element] = field(default_factory=list)
    subsections: List["_SectionBuilder"] = field(default_factory=list)

    def build(self, parent_path: Tuple[str, ...]) -> Section:
        path = parent_path + (self.title,)
        return Section(
            section_id=self.section_id,
            title=self.title,
            level=self.level,
            path=path,
            content=tuple(self.content),
            subsections=tuple(builder.build(path) for builder in self.subsections),
            heading=self.heading,
        )


class _IdAllocator:
    """Hands out unique section ids, suffixing repeats with -2, -3, ..."""

    def __init__(self):
        self._used: Dict[str, int] = {}

    def allocate(self, base: str) -> str:
        if base not in self._used:
            self._used[base] = 1
            return base
        count = self._used[base]
        while True:
            count += 1
            candidate = f"{base}-{count}"
            if candidate not in self._used:
                self._used[base] = count
                self._used[candidate] = 1
                return candidate


def synthetic_root(elements: Sequence[Element]) -> Section:
    """The single section standing in for a document without headings."""
    return Section(
        section_id=SYNTHETIC_ROOT_ID,
        title=SYNTHETIC_ROOT_TITLE,
        level=SYNTHETIC_ROOT_LEVEL,
        path=(SYNTHETIC_ROOT_TITLE,),
        content=tuple(elements),
    )


def _has_heading(element: Element) -> bool:
    return any(node.kind is ElementKind.HEADING for node in element.iter())


def outline_stream(elements: Iterable[Element]) -> Iterator[Element]:
    """
    Yield the elements the outline is built from, in document order.

    Any container that holds a heading somewhere below it (layout blocks,
    macro bodies, tables, lists) is replaced by its children, recursively,
    so every heading of the Document opens a section. Every other element
    is yielded as is.
    """
    for element in elements:
        if element.is_container and _has_heading(element):
            yield from outline_stream(element.children)
        else:
            yield element


class StructureAnalyzer:
    """
    Builds the Section tree for a Document.

    The analyzer is stateless; ``analyze`` is a pure function of its input
    and may be called concurrently.
    """

    def analyze(self, source: AnalyzerInput) -> List[Section]:
        """
        Derive the outline of a Document or element sequence.

        Returns a single synthetic root when there are no headings. If the
        hierarchy cannot be built, a warning is logged and the synthetic
        root over the whole input is returned instead of raising.
        """
        elements = self._elements_of(source)
        try:
            return self._build(elements)
        except Exception as e:
            logger.warning(
                f"Structure analysis failed, falling back to a single section: {e}",
                extra={"exception_type": type(e).__name__, "element_count": len(elements)},
            )
            return [synthetic_root(elements)]

    @staticmethod
    def _elements_of(source: AnalyzerInput) -> Tuple[Element, ...]:
        if isinstance(source, Document):
            return source.elements
        if isinstance(source, Element):
            return (source,)
        if isinstance(source, (str, bytes)):
            raise TypeError("analyze() expects a Document or a sequence of Elements, not a string")
        return tuple(source)

    def _build(self, elements: Tuple[Element, ...]) -> List[Section]:
        stream = list(outline_stream(elements))
        if not any(element.kind is ElementKind.HEADING for element in stream):
            logger.debug("No headings found, using synthetic root section")
            return [synthetic_root(elements)]

        ids = _IdAllocator()
        roots: List[_SectionBuilder] = []
        stack: List[Tuple[int, _SectionBuilder]] = []
        current: Optional[_SectionBuilder] = None

        for element in stream:
            if element.kind is not ElementKind.HEADING:
                if current is not None:
                    current.content.append(element)
                continue

            level = element.level or 1
            title = element.plain_text()
            current = _SectionBuilder(
                heading=element,
                section_id=ids.allocate(element.attributes.get("id") or slugify(title)),
                title=title,
                level=level,
            )

            while stack and stack[-1][0] >= level:
                stack.pop()
            if stack:
                stack[-1][1].subsections.append(current)
            else:
                roots.append(current)
            stack.append((level, current))

        sections = [builder.build(()) for builder in roots]
        logger.debug(f"Built outline with {len(sections)} top-level sections")
        return sections


def analyze(source: AnalyzerInput) -> List[Section]:
    """Analyze with a default StructureAnalyzer."""
    return StructureAnalyzer().analyze(source)
