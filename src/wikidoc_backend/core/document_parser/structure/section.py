"""
Document Section Module - Outline Node Representation

This module provides the Section dataclass, one node of the outline derived
from a Document's headings.

Key Components:
- Section: A heading, the elements it owns and its subsections
- slugify: Title to section-id conversion

Sections are read-only views. Their ``content`` holds the very Element
instances of the source Document (no copies), and there is no parent
back-pointer; the ancestry of a section is recorded in ``path``.

Usage:
    >>> from wikidoc_backend.core.document_parser import parse_document, analyze
    >>> sections = analyze(parse_document("<h1>Intro</h1><p>Hi</p>"))
    >>> sections[0].title, sections[0].level, sections[0].path
    ('Intro', 1, ('Intro',))
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from ..types import Element

SYNTHETIC_ROOT_ID = "document"
SYNTHETIC_ROOT_TITLE = "Document"
SYNTHETIC_ROOT_LEVEL = 0

_SLUG_INVALID = re.compile(r"[^\w]+", re.UNICODE)


def slugify(title: str) -> str:
    """
    Convert a section title to an identifier.

    Lower-cases the title and replaces every run of non-word characters with
    a single hyphen. Titles without any word characters become ``section``.

    Example:
        >>> slugify("Getting Started: Setup & Install")
        'getting-started-setup-install'
    """
    slug = _SLUG_INVALID.sub("-", title.lower()).replace("_", "-").strip("-")
    slug = re.sub(r"-{2,}", "-", slug)
    return slug or "section"


@dataclass(frozen=True)
class Section:
    """
    A node in the document outline.

    Attributes:
        section_id: The heading's ``id`` attribute if present, else a unique
            slug of the title (``-2``, ``-3``... for repeats); ``document``
            for the synthetic root
        title: The heading's text
        level: Heading level 1-6, or 0 for the synthetic root
        path: Ancestor titles followed by this section's own title
        content: Elements between this heading and the next heading
        subsections: Child sections in document order
        heading: The heading Element owning this section (None for the root)
    """
    section_id: str
    title: str
    level: int
    path: Tuple[str, ...]
    content: Tuple[Element, ...] = ()
    subsections: Tuple["Section", ...] = ()
    heading: Optional[Element] = None

    def __post_init__(self):
        if not isinstance(self.level, int) or self.level < 0 or self.level > 6:
            raise ValueError(f"level must be an integer in 0-6, got {self.level!r}")
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "content", tuple(self.content))
        object.__setattr__(self, "subsections", tuple(self.subsections))

    @property
    def is_synthetic_root(self) -> bool:
        return self.level == SYNTHETIC_ROOT_LEVEL and self.heading is None

    @property
    def depth(self) -> int:
        """Nesting depth in the outline (1 for top-level sections)."""
        return len(self.path)

    def walk(self) -> Iterator["Section"]:
        """Yield this section and all descendants in pre-order."""
        yield self
        for subsection in self.subsections:
            yield from subsection.walk()

    def iter_elements(self) -> Iterator[Element]:
        """Heading, content and subsection elements in document order, recursively."""
        if self.heading is not None:
            yield self.heading
        for element in self.content:
            yield from element.iter()
        for subsection in self.subsections:
            yield from subsection.iter_elements()

    def to_dict(self, include_content: bool = True) -> Dict[str, Any]:
        """Convert section to dictionary representation."""
        result: Dict[str, Any] = {
            "id": self.section_id,
            "title": self.title,
            "level": self.level,
            "path": list(self.path),
        }
        if include_content:
            result["content"] = [element.to_dict() for element in self.content]
        result["subsections"] = [
            subsection.to_dict(include_content=include_content)
            for subsection in self.subsections
        ]
        return result

    def __repr__(self) -> str:
        return (
            f"Section(id={self.section_id!r}, title={self.title!r}, level={self.level}, "
            f"content={len(self.content)}, subsections={len(self.subsections)})"
        )
