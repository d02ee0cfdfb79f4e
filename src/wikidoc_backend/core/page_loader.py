"""
Page loader.

Glue between a MarkupSource and the parsing core: fetch a document's
markup, parse it and optionally derive its outline.
"""

import logging
from typing import List, Optional

from ..exceptions.source_exceptions import MarkupSourceError
from .document_parser.markup_parser import MarkupTreeParser
from .document_parser.structure.analyzer import StructureAnalyzer
from .document_parser.structure.section import Section
from .document_parser.types import Document
from .markup_source import MarkupSource, page_id_from_url

logger = logging.getLogger(__name__)


class PageLoader:
    """Loads documents from a markup source into the document model."""

    def __init__(
        self,
        source: MarkupSource,
        parser: Optional[MarkupTreeParser] = None,
        analyzer: Optional[StructureAnalyzer] = None,
    ) -> None:
        self.source = source
        self.parser = parser or MarkupTreeParser()
        self.analyzer = analyzer or StructureAnalyzer()

    def load(self, document_id: str) -> Document:
        """
        Fetch and parse one document.

        Raises:
            MarkupSourceError: If the source cannot supply the markup
            ParseError: If the markup cannot be tokenized
        """
        page = self.source.fetch(document_id)
        logger.debug(f"Loaded document {document_id} ('{page.title}', {len(page.markup)} characters)")
        return self.parser.parse(page.markup, page.title)

    def load_by_url(self, url: str) -> Document:
        """Fetch and parse the document a page URL points to."""
        document_id = page_id_from_url(url)
        if document_id is None:
            raise MarkupSourceError(f"Could not determine a page id from URL: {url}")
        return self.load(document_id)

    def outline(self, document_id: str) -> List[Section]:
        """Fetch, parse and analyze one document."""
        return self.analyzer.analyze(self.load(document_id))
