"""
wikidoc core.

- document_parser/: markup parsing, outline derivation, content extraction
- markup_source: MarkupSource protocol and its HTTP implementation
- page_loader: PageLoader, fetch-then-parse glue
"""

from .markup_source import HttpMarkupSource, MarkupSource, SourcePage, page_id_from_url
from .page_loader import PageLoader

__all__ = [
    "MarkupSource",
    "HttpMarkupSource",
    "SourcePage",
    "page_id_from_url",
    "PageLoader",
]
