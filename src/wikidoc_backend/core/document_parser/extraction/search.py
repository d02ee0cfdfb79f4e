"""
Keyword search over documents and section trees.

The query is always matched literally: it is escaped before compilation,
so no query string can make the search raise.
"""

import re
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Pattern, Tuple

from ..structure.section import Section
from ..types import Element, ElementKind
from .scope import Scope, iter_scope_leaves


@dataclass(frozen=True)
class SearchOptions:
    """
    Options for ``search``.

    ``include_kinds`` restricts results to leaves whose own kind, or the kind
    of one of their ancestors, is listed. None means every kind.
    """
    case_sensitive: bool = False
    whole_word: bool = False
    include_kinds: Optional[FrozenSet[ElementKind]] = None

    def __post_init__(self):
        if self.include_kinds is not None:
            object.__setattr__(self, "include_kinds", frozenset(self.include_kinds))


@dataclass(frozen=True)
class SearchResult:
    """
    One matching leaf element.

    Attributes:
        element: The leaf whose text matched
        section: Owning section when searching sections, else None
        matches: (start, end) offsets of every match in ``text``
        text: The leaf text that was searched
    """
    element: Element
    section: Optional[Section]
    matches: Tuple[Tuple[int, int], ...]
    text: str

    @property
    def match_count(self) -> int:
        return len(self.matches)

    @property
    def matched_text(self) -> List[str]:
        return [self.text[start:end] for start, end in self.matches]

    def snippet(self, width: int = 40) -> str:
        """Text around the first match, with ellipses where it was cut."""
        start, end = self.matches[0]
        left = max(0, start - width)
        right = min(len(self.text), end + width)
        prefix = "..." if left > 0 else ""
        suffix = "..." if right < len(self.text) else ""
        return f"{prefix}{self.text[left:right]}{suffix}"


def compile_query(query: str, options: SearchOptions) -> Pattern[str]:
    """Compile a literal query into a pattern honoring the options."""
    pattern = re.escape(query)
    if options.whole_word:
        pattern = rf"(?<!\w){pattern}(?!\w)"
    flags = 0 if options.case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


def _kind_selected(
    element: Element,
    ancestors: Iterable[ElementKind],
    include_kinds: Optional[FrozenSet[ElementKind]],
) -> bool:
    if include_kinds is None:
        return True
    return element.kind in include_kinds or any(kind in include_kinds for kind in ancestors)


def search(scope: Scope, query: str, options: Optional[SearchOptions] = None) -> List[SearchResult]:
    """
    Find leaves whose text contains ``query``.

    Returns one SearchResult per matching leaf, in document order. An empty
    query matches nothing.
    """
    if not query:
        return []
    options = options or SearchOptions()
    pattern = compile_query(query, options)

    results: List[SearchResult] = []
    for leaf, ancestors, section in iter_scope_leaves(scope):
        text = leaf.text
        if not text or not _kind_selected(leaf, ancestors, options.include_kinds):
            continue
        spans = tuple(match.span() for match in pattern.finditer(text))
        if spans:
            results.append(SearchResult(element=leaf, section=section, matches=spans, text=text))
    return results
