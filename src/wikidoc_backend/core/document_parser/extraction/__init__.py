"""
Read-only extraction over documents and outlines.

- content_extractor: extract_text, find_by_kind, find_by_attribute,
  count_kinds, table_of_contents, summarize, ContentExtractor
- search: literal keyword search with SearchOptions and SearchResult
- structured: tables, lists and headings projected to plain data
"""

from .content_extractor import (
    ContentExtractor,
    count_kinds,
    extract_text,
    find_by_attribute,
    find_by_kind,
    summarize,
    table_of_contents,
)
from .search import SearchOptions, SearchResult, compile_query, search
from .structured import HeadingData, ListData, StructuredData, TableData, structured_data

__all__ = [
    "ContentExtractor",
    "extract_text",
    "find_by_kind",
    "find_by_attribute",
    "count_kinds",
    "table_of_contents",
    "summarize",
    "SearchOptions",
    "SearchResult",
    "compile_query",
    "search",
    "StructuredData",
    "TableData",
    "ListData",
    "HeadingData",
    "structured_data",
]
