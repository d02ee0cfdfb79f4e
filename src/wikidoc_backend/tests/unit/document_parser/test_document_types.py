"""
Tests for the document model: ElementKind, Element and Document.
"""

import pytest

from wikidoc_backend.core.document_parser import Document, Element, ElementKind
from wikidoc_backend.core.document_parser.types import merge_attributes


class TestMergeAttributes:
    """Tests for attribute map construction."""

    def test_derived_keys_win_on_collision(self):
        merged = merge_attributes({"level": "9", "id": "a"}, {"level": "2"})
        assert merged == {"level": "2", "id": "a"}

    def test_values_are_stringified(self):
        merged = merge_attributes({"class": ["wide", "striped"]}, {"ordered": True, "skip": None, "n": 3})
        assert merged == {"class": "wide striped", "ordered": "true", "n": "3"}

    def test_source_order_is_kept(self):
        merged = merge_attributes({"b": "1", "a": "2"})
        assert list(merged) == ["b", "a"]


class TestElement:
    """Tests for the Element dataclass."""

    def test_leaf_has_text_and_no_children(self):
        element = Element.leaf(ElementKind.PARAGRAPH, "hello")
        assert element.is_leaf
        assert not element.is_container
        assert element.content == "hello"
        assert element.children == ()

    def test_container_has_children_and_no_text(self):
        child = Element.leaf(ElementKind.TEXT, "x")
        element = Element.container(ElementKind.PARAGRAPH, [child])
        assert element.is_container
        assert element.text is None
        assert element.content == (child,)

    def test_text_and_children_together_are_rejected(self):
        child = Element.leaf(ElementKind.TEXT, "x")
        with pytest.raises(ValueError):
            Element(kind=ElementKind.PARAGRAPH, text="y", children=(child,))

    def test_kind_must_be_element_kind(self):
        with pytest.raises(ValueError):
            Element(kind="paragraph", text="x")

    def test_attributes_are_read_only(self):
        element = Element.leaf(ElementKind.LINK, "docs", {"href": "/docs"})
        with pytest.raises(TypeError):
            element.attributes["href"] = "/other"

    def test_elements_are_immutable(self):
        element = Element.leaf(ElementKind.TEXT, "x")
        with pytest.raises(AttributeError):
            element.text = "y"

    def test_heading_level(self):
        heading = Element.leaf(ElementKind.HEADING, "Intro", {"level": "3"})
        assert heading.level == 3
        assert Element.leaf(ElementKind.PARAGRAPH, "p", {"level": "3"}).level is None

    def test_iter_is_pre_order(self):
        inner = Element.container(ElementKind.EMPHASIS, [Element.leaf(ElementKind.TEXT, "b")])
        outer = Element.container(ElementKind.PARAGRAPH, [Element.leaf(ElementKind.TEXT, "a"), inner])
        assert [e.kind for e in outer.iter()] == [
            ElementKind.PARAGRAPH,
            ElementKind.TEXT,
            ElementKind.EMPHASIS,
            ElementKind.TEXT,
        ]

    def test_plain_text_joins_non_empty_leaves(self):
        element = Element.container(ElementKind.PARAGRAPH, [
            Element.leaf(ElementKind.TEXT, "one"),
            Element.leaf(ElementKind.IMAGE, ""),
            Element.leaf(ElementKind.TEXT, "two"),
        ])
        assert element.plain_text() == "one two"

    def test_to_dict(self):
        element = Element.container(ElementKind.LIST, [Element.leaf(ElementKind.LIST_ITEM, "a")], {"ordered": False})
        assert element.to_dict() == {
            "kind": "list",
            "attributes": {"ordered": "false"},
            "children": [{"kind": "list-item", "attributes": {}, "text": "a"}],
        }

    def test_equal_elements_compare_equal(self):
        assert Element.leaf(ElementKind.TEXT, "x") == Element.leaf(ElementKind.TEXT, "x")


class TestDocument:
    """Tests for Document accessors."""

    def setup_method(self):
        self.paragraph = Element.leaf(ElementKind.PARAGRAPH, "nested")
        self.document = Document(title="Page", elements=[
            Element.leaf(ElementKind.HEADING, "Intro", {"level": "1"}),
            Element.container(ElementKind.MACRO, [self.paragraph], {"name": "info"}),
            Element.leaf(ElementKind.CODE, "x = 1", {"name": "code", "isBlock": "true"}),
            Element.leaf(ElementKind.ERROR, "", {"message": "boom", "tag": "p"}),
        ])

    def test_accessors_find_nested_elements(self):
        assert self.document.paragraphs() == [self.paragraph]
        assert [h.text for h in self.document.headings()] == ["Intro"]
        assert len(self.document.errors()) == 1

    def test_macros_returns_macro_kind_only(self):
        macros = self.document.macros()
        assert [m.name for m in macros] == ["info"]

    def test_find_by_kind_accepts_several_kinds(self):
        found = self.document.find_by_kind(ElementKind.HEADING, ElementKind.CODE)
        assert [e.kind for e in found] == [ElementKind.HEADING, ElementKind.CODE]

    def test_full_content_and_len(self):
        assert len(self.document) == 4
        assert self.document.full_content() == list(self.document.elements)
        assert not self.document.is_empty
        assert Document(title="Empty").is_empty

    def test_to_dict(self):
        data = self.document.to_dict()
        assert data["title"] == "Page"
        assert len(data["elements"]) == 4
