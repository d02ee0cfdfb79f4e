"""
Outline derivation for parsed documents.

- section: Section, the read-only outline node
- analyzer: StructureAnalyzer, headings to a Section tree
- navigation: flatten, find_by_id, find_by_title, path_string
"""

from .analyzer import StructureAnalyzer, analyze, outline_stream, synthetic_root
from .navigation import find_by_id, find_by_title, flatten, path_string
from .section import SYNTHETIC_ROOT_ID, SYNTHETIC_ROOT_TITLE, Section, slugify

__all__ = [
    "Section",
    "StructureAnalyzer",
    "analyze",
    "outline_stream",
    "synthetic_root",
    "slugify",
    "flatten",
    "find_by_id",
    "find_by_title",
    "path_string",
    "SYNTHETIC_ROOT_ID",
    "SYNTHETIC_ROOT_TITLE",
]
