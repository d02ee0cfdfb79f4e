"""
Tests for PageLoader.
"""

import pytest

from wikidoc_backend.core import PageLoader, SourcePage
from wikidoc_backend.core.document_parser import ElementKind, MarkupTreeParser
from wikidoc_backend.exceptions import DocumentNotFoundError, MarkupSourceError, ParseError


class FakeSource:
    """In-memory markup source."""

    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def fetch(self, document_id):
        self.requested.append(document_id)
        if document_id not in self.pages:
            raise DocumentNotFoundError(f"Document {document_id} not found", document_id=document_id, status_code=404)
        title, markup = self.pages[document_id]
        return SourcePage(document_id=document_id, title=title, markup=markup)


class TestPageLoader:
    """Tests for fetch-then-parse loading."""

    def setup_method(self):
        self.source = FakeSource({
            "42": ("Runbook", "<h1>Start</h1><p>Do this.</p><h2>Then</h2><p>Do that.</p>"),
            "43": ("Broken", "<p>ok</p><table"),
        })
        self.loader = PageLoader(self.source)

    def test_load(self):
        document = self.loader.load("42")
        assert document.title == "Runbook"
        assert [e.kind for e in document.elements][:2] == [ElementKind.HEADING, ElementKind.PARAGRAPH]

    def test_load_by_url(self):
        document = self.loader.load_by_url("https://wiki.example.com/spaces/OPS/pages/42/Runbook")
        assert document.title == "Runbook"
        assert self.source.requested == ["42"]

    def test_load_by_url_without_id(self):
        with pytest.raises(MarkupSourceError):
            self.loader.load_by_url("https://wiki.example.com/display/OPS/Runbook")
        assert self.source.requested == []

    def test_outline(self):
        sections = self.loader.outline("42")
        assert [s.title for s in sections] == ["Start"]
        assert [s.title for s in sections[0].subsections] == ["Then"]

    def test_source_errors_propagate(self):
        with pytest.raises(DocumentNotFoundError):
            self.loader.load("99")

    def test_parse_errors_propagate(self):
        with pytest.raises(ParseError):
            self.loader.load("43")

    def test_custom_parser(self):
        loader = PageLoader(self.source, parser=MarkupTreeParser(max_depth=1))
        document = loader.load("42")
        assert len(document.headings()) == 2
