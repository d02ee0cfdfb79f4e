"""
Navigation helpers over a Section tree.
"""

from typing import Iterable, List, Optional

from .section import Section


def flatten(sections: Iterable[Section]) -> List[Section]:
    """All sections in pre-order (each section before its subsections)."""
    flat: List[Section] = []
    for section in sections:
        flat.extend(section.walk())
    return flat


def find_by_id(sections: Iterable[Section], section_id: str) -> Optional[Section]:
    for section in flatten(sections):
        if section.section_id == section_id:
            return section
    return None


def find_by_title(sections: Iterable[Section], title: str, exact_match: bool = True) -> List[Section]:
    """
    Sections whose title matches.

    With ``exact_match`` the title must be equal; otherwise a
    case-insensitive substring match is used.
    """
    if exact_match:
        return [section for section in flatten(sections) if section.title == title]
    needle = title.lower()
    return [section for section in flatten(sections) if needle in section.title.lower()]


def path_string(section: Section, separator: str = " > ") -> str:
    return separator.join(section.path)
