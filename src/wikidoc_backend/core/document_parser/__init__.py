"""
Document Parser Package

Turns wiki storage-format markup into a typed document model, derives the
section outline and extracts content from both.

Components:
- types: ElementKind, Element, Document
- markup_parser: MarkupTreeParser, parse_document
- macros/: MacroRegistry, per-macro handlers, typed macro parameters
- structure/: Section, StructureAnalyzer, navigation helpers
- extraction/: text extraction, search, table of contents, summaries

Data flow: markup -> MarkupTreeParser (MacroRegistry for macro tags) ->
Document -> StructureAnalyzer -> Section tree -> extraction functions.
"""

from .types import INLINE_KINDS, Document, Element, ElementKind, iter_elements

from .markup_parser import MarkupTreeParser, parse_document

from .macros import (
    MACRO_PARAMETER_TYPES,
    GenericMacroHandler,
    MacroHandler,
    MacroRegistry,
    macro_parameters,
)

from .structure import (
    Section,
    StructureAnalyzer,
    analyze,
    find_by_id,
    find_by_title,
    flatten,
    path_string,
)

from .extraction import (
    ContentExtractor,
    SearchOptions,
    SearchResult,
    StructuredData,
    count_kinds,
    extract_text,
    find_by_attribute,
    find_by_kind,
    search,
    structured_data,
    summarize,
    table_of_contents,
)

__all__ = [
    "ElementKind",
    "Element",
    "Document",
    "INLINE_KINDS",
    "iter_elements",
    "MarkupTreeParser",
    "parse_document",
    "MacroRegistry",
    "MacroHandler",
    "GenericMacroHandler",
    "MACRO_PARAMETER_TYPES",
    "macro_parameters",
    "Section",
    "StructureAnalyzer",
    "analyze",
    "flatten",
    "find_by_id",
    "find_by_title",
    "path_string",
    "ContentExtractor",
    "SearchOptions",
    "SearchResult",
    "extract_text",
    "find_by_kind",
    "find_by_attribute",
    "count_kinds",
    "search",
    "summarize",
    "table_of_contents",
    "StructuredData",
    "structured_data",
]
