"""
Content Extractor

Read-only operations over Documents, Elements and Section trees: text
extraction, typed filtering, attribute lookup, tables of contents and
summaries. All functions are pure and pull-based; nothing is cached.
The plain-data projection of tables and lists lives in ``structured``.
"""

import logging
import re
from collections import Counter
from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Union

from ....utils.config.settings import ExtractionSettings
from ..structure.analyzer import StructureAnalyzer
from ..structure.section import Section
from ..types import Document, Element, ElementKind
from .scope import Scope, iter_scope_elements, iter_scope_leaves
from .search import SearchOptions, SearchResult, search
from .structured import StructuredData, structured_data

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# Spaces introduced at inline element boundaries next to punctuation.
SPACE_BEFORE_CLOSING = re.compile(r"\s+([.,;:!?%)\]}])")
SPACE_AFTER_OPENING = re.compile(r"([(\[{])\s+")

KindFilter = Union[ElementKind, Iterable[ElementKind]]


def _kind_set(kinds: KindFilter) -> frozenset:
    if isinstance(kinds, ElementKind):
        return frozenset({kinds})
    return frozenset(kinds)


def extract_text(scope: Scope) -> str:
    """
    Leaf text of the scope, depth-first, one element per line.

    Empty leaves are skipped. A section contributes its title (through its
    heading), its content and its subsections.
    """
    return "\n".join(leaf.text for leaf, _, _ in iter_scope_leaves(scope) if leaf.text)


def find_by_kind(scope: Scope, kinds: KindFilter) -> List[Element]:
    """
    Elements of the given kinds at any depth, in document order.

    Every container is descended into whether or not it matched itself.
    """
    wanted = _kind_set(kinds)
    return [element for element in iter_scope_elements(scope) if element.kind in wanted]


def find_by_attribute(
    scope: Scope,
    name: str,
    value: Optional[str] = None,
    case_sensitive: bool = False,
    exact_match: bool = False,
) -> List[Element]:
    """
    Elements carrying attribute ``name``.

    Without ``value`` the attribute only has to be present. With a value the
    attribute must contain it (or equal it when ``exact_match`` is set).
    """
    results: List[Element] = []
    needle = value if value is None or case_sensitive else value.lower()
    for element in iter_scope_elements(scope):
        if name not in element.attributes:
            continue
        if needle is None:
            results.append(element)
            continue
        candidate = element.attributes[name]
        if not case_sensitive:
            candidate = candidate.lower()
        if (candidate == needle) if exact_match else (needle in candidate):
            results.append(element)
    return results


def count_kinds(scope: Scope) -> Counter:
    """Number of elements of each kind in the scope, containers included."""
    return Counter(element.kind for element in iter_scope_elements(scope))


def _filter_levels(sections: Sequence[Section], min_level: int, max_level: int) -> List[Section]:
    return [
        replace(section, subsections=tuple(_filter_levels(section.subsections, min_level, max_level)))
        for section in sections
        if min_level <= section.level <= max_level
    ]


def table_of_contents(
    source: Union[Document, Sequence[Section]],
    min_level: int = 1,
    max_level: int = 6,
    analyzer: Optional[StructureAnalyzer] = None,
) -> List[Section]:
    """
    The outline restricted to headings in ``[min_level, max_level]``.

    Filtering runs top-down: a section outside the range is dropped together
    with its whole subtree, even if some descendants are in range. Returned
    sections are shallow copies sharing the original Elements.
    """
    if min_level > max_level:
        raise ValueError(f"min_level ({min_level}) must not exceed max_level ({max_level})")

    if isinstance(source, Document):
        sections = (analyzer or StructureAnalyzer()).analyze(source)
    else:
        sections = list(source)
    return _filter_levels(sections, min_level, max_level)


def inline_text(element: Element) -> str:
    """
    Text of an inline container as it reads.

    Leaf texts are joined by single spaces, then the spaces this puts in
    front of closing punctuation or after opening brackets are removed, so
    ``<p>Hello <b>world</b>!</p>`` reads ``Hello world!``.
    """
    text = element.plain_text(" ")
    text = SPACE_BEFORE_CLOSING.sub(r"\1", text)
    return SPACE_AFTER_OPENING.sub(r"\1", text)


def _truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


def summarize(scope: Scope, max_length: int = 200) -> str:
    """
    A short summary: the first non-empty paragraph, truncated.

    Text longer than ``max_length`` is cut to ``max_length`` characters and
    followed by ``...``. Without any paragraph the whole extracted text is
    used, under the same rule.
    """
    if max_length < 1:
        raise ValueError(f"max_length must be positive, got {max_length}")

    for paragraph in find_by_kind(scope, ElementKind.PARAGRAPH):
        text = inline_text(paragraph)
        if text:
            return _truncate(text, max_length)

    logger.debug("No paragraph found, summarizing full text")
    return _truncate(extract_text(scope), max_length)


class ContentExtractor:
    """
    The extraction functions bundled with configured defaults.

    Stateless apart from its settings; one instance can serve any number of
    documents.
    """

    def __init__(self, settings: Optional[ExtractionSettings] = None, analyzer: Optional[StructureAnalyzer] = None) -> None:
        """
        Initialize the extractor.

        Args:
            settings: ExtractionSettings providing default options
            analyzer: Analyzer used when a Document needs an outline
        """
        self.settings = settings or ExtractionSettings()
        self.analyzer = analyzer or StructureAnalyzer()

    def default_search_options(self) -> SearchOptions:
        return SearchOptions(
            case_sensitive=self.settings.case_sensitive,
            whole_word=self.settings.whole_word,
        )

    def extract_text(self, scope: Scope) -> str:
        return extract_text(scope)

    def find_by_kind(self, scope: Scope, kinds: KindFilter) -> List[Element]:
        return find_by_kind(scope, kinds)

    def find_by_attribute(self, scope: Scope, name: str, value: Optional[str] = None, **kwargs) -> List[Element]:
        return find_by_attribute(scope, name, value, **kwargs)

    def count_kinds(self, scope: Scope) -> Counter:
        return count_kinds(scope)

    def structured_data(self, scope: Scope) -> StructuredData:
        return structured_data(scope)

    def search(self, scope: Scope, query: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
        return search(scope, query, options or self.default_search_options())

    def table_of_contents(
        self,
        source: Union[Document, Sequence[Section]],
        min_level: Optional[int] = None,
        max_level: Optional[int] = None,
    ) -> List[Section]:
        return table_of_contents(
            source,
            self.settings.toc_min_level if min_level is None else min_level,
            self.settings.toc_max_level if max_level is None else max_level,
            analyzer=self.analyzer,
        )

    def summarize(self, scope: Scope, max_length: Optional[int] = None) -> str:
        return summarize(scope, self.settings.summary_max_length if max_length is None else max_length)
