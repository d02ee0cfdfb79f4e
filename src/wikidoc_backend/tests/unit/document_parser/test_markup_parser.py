"""
Tests for the markup tree parser.

Covers element dispatch for each tag family, per-element fault isolation,
the nesting depth limit and tokenization failures.
"""

import logging

import pytest

from wikidoc_backend.core.document_parser import (
    Element,
    ElementKind,
    MarkupTreeParser,
    parse_document,
)
from wikidoc_backend.exceptions import ParseError
from wikidoc_backend.utils.config.settings import ParserSettings


def kinds(elements):
    return [element.kind for element in elements]


class TestBasicElements:
    """Tests for headings, paragraphs and inline content."""

    def test_headings_carry_level(self, parser):
        document = parser.parse("<h1>A</h1><h3 id='deep'>C</h3>")
        first, second = document.elements
        assert first.kind is ElementKind.HEADING
        assert first.text == "A"
        assert first.level == 1
        assert second.level == 3
        assert second.attributes["id"] == "deep"

    def test_plain_paragraph_is_leaf(self, parser):
        document = parser.parse("<p>  only   text </p>")
        assert document.elements == (Element.leaf(ElementKind.PARAGRAPH, "only text"),)

    def test_paragraph_with_inline_tags_is_container(self, parser):
        document = parser.parse("<p>Hello <strong>bold</strong> and <em>soft</em> world</p>")
        paragraph = document.elements[0]
        assert paragraph.is_container
        assert kinds(paragraph.children) == [
            ElementKind.TEXT,
            ElementKind.EMPHASIS,
            ElementKind.TEXT,
            ElementKind.EMPHASIS,
            ElementKind.TEXT,
        ]
        assert paragraph.children[1].attributes["style"] == "bold"
        assert paragraph.children[3].attributes["style"] == "italic"
        assert paragraph.plain_text() == "Hello bold and soft world"

    def test_block_elements_in_paragraph_become_text(self, parser):
        document = parser.parse("<p>intro<table><tr><td>c</td></tr></table></p>")
        paragraph = document.elements[0]
        assert paragraph.children == (
            Element.leaf(ElementKind.TEXT, "intro"),
            Element.leaf(ElementKind.TEXT, "c"),
        )
        assert document.tables() == []

    def test_paragraph_children_are_inline_at_any_depth(self, parser):
        document = parser.parse("<p>a <span>b <ul><li>x</li></ul><h3>y</h3></span></p>")
        span = document.elements[0].children[1]
        assert span.kind is ElementKind.CONTAINER
        assert kinds(span.children) == [ElementKind.TEXT, ElementKind.TEXT, ElementKind.TEXT]
        assert span.plain_text() == "b x y"
        assert document.headings() == []
        assert document.lists() == []

    def test_empty_paragraph_is_dropped(self, parser):
        document = parser.parse("<p>   </p><p>kept</p>")
        assert [e.text for e in document.elements] == ["kept"]

    def test_links(self, parser):
        document = parser.parse('<p><a href="https://example.com">site</a><a>bare</a></p>')
        site, bare = document.elements[0].children
        assert site.kind is ElementKind.LINK
        assert site.text == "site"
        assert site.attributes["href"] == "https://example.com"
        assert bare.attributes["href"] == ""

    def test_resource_link_to_page(self, parser):
        markup = '<p><ac:link><ri:page ri:content-title="Release Notes" /></ac:link></p>'
        link = parser.parse(markup).elements[0].children[0]
        assert link.kind is ElementKind.LINK
        assert link.text == "Release Notes"
        assert link.attributes["resourceType"] == "page"
        assert link.attributes["ri:content-title"] == "Release Notes"

    def test_resource_link_body_and_anchor(self, parser):
        markup = (
            '<p><ac:link ac:anchor="setup"><ac:plain-text-link-body><![CDATA[Set up]]>'
            '</ac:plain-text-link-body></ac:link></p>'
        )
        link = parser.parse(markup).elements[0].children[0]
        assert link.text == "Set up"
        assert link.attributes["href"] == "#setup"

    def test_images(self, parser):
        markup = (
            '<p><img src="/a.png" alt="Diagram"/>'
            '<ac:image ac:alt="Screenshot"><ri:attachment ri:filename="shot.png" /></ac:image></p>'
        )
        html_image, wiki_image = parser.parse(markup).elements[0].children
        assert html_image.kind is ElementKind.IMAGE
        assert html_image.attributes["src"] == "/a.png"
        assert html_image.text == "Diagram"
        assert wiki_image.attributes["src"] == "shot.png"
        assert wiki_image.attributes["alt"] == "Screenshot"

    def test_source_attributes_keep_values_and_order(self, parser):
        # html.parser folds attribute names to lower case; values are untouched
        document = parser.parse('<p data-fooBar="MixedValue" class="a  b" title=" T ">x</p>')
        attributes = document.elements[0].attributes
        assert list(attributes.items()) == [
            ("data-foobar", "MixedValue"),
            ("class", "a b"),
            ("title", " T "),
        ]

    def test_preformatted_block_keeps_whitespace(self, parser):
        document = parser.parse("<pre>line one\n    indented</pre>")
        code = document.elements[0]
        assert code.kind is ElementKind.CODE
        assert code.text == "line one\n    indented"
        assert code.attributes["isBlock"] == "true"

    def test_unknown_tags_become_containers_or_unknown_leaves(self, parser):
        document = parser.parse("<div class='note'><p>inside</p></div><span>loose</span>")
        container, unknown = document.elements
        assert container.kind is ElementKind.CONTAINER
        assert container.attributes["tag"] == "div"
        assert container.attributes["class"] == "note"
        assert kinds(container.children) == [ElementKind.PARAGRAPH]
        assert unknown.kind is ElementKind.UNKNOWN
        assert unknown.text == "loose"

    def test_comments_are_ignored(self, parser):
        document = parser.parse("<!-- hidden --><p>shown</p>")
        assert [e.text for e in document.elements] == ["shown"]

    def test_body_wrapper_is_unwrapped(self, parser):
        document = parser.parse("<html><body><h1>T</h1></body></html>")
        assert kinds(document.elements) == [ElementKind.HEADING]

    def test_title_is_kept(self, parser):
        assert parser.parse("<p>x</p>", title="My Page").title == "My Page"


class TestTables:
    """Tests for table parsing."""

    def test_table_rows_and_cells(self, parser):
        markup = (
            "<table><thead><tr><td>Name</td><td>Role</td></tr></thead>"
            "<tbody><tr><td>Ada</td><td><strong>Lead</strong></td></tr></tbody></table>"
        )
        table = parser.parse(markup).elements[0]
        assert table.kind is ElementKind.TABLE
        header, body = table.children
        assert header.attributes["isHeader"] == "true"
        assert "isHeader" not in body.attributes
        assert [cell.text for cell in header.children] == ["Name", "Role"]
        assert body.children[0].attributes["cellType"] == "data"
        assert kinds(body.children[1].children) == [ElementKind.EMPHASIS]

    def test_row_of_th_cells_is_a_header(self, parser):
        table = parser.parse("<table><tr><th>A</th></tr><tr><td>1</td></tr></table>").elements[0]
        assert table.children[0].attributes["isHeader"] == "true"
        assert table.children[0].children[0].attributes["cellType"] == "header"

    def test_nested_table_rows_stay_nested(self, parser):
        markup = "<table><tr><td><table><tr><td>inner</td></tr></table></td></tr></table>"
        table = parser.parse(markup).elements[0]
        assert len(table.children) == 1
        inner_table = table.children[0].children[0].children[0]
        assert inner_table.kind is ElementKind.TABLE


class TestLists:
    """Tests for list parsing."""

    def test_ordered_flag(self, parser):
        document = parser.parse("<ul><li>a</li></ul><ol><li>b</li></ol>")
        assert [e.attributes["ordered"] for e in document.elements] == ["false", "true"]

    def test_nested_list_item(self, parser):
        document = parser.parse("<ul><li>1<ul><li>1a</li></ul></li></ul>")
        assert len(document.elements) == 1
        outer = document.elements[0]
        assert outer.kind is ElementKind.LIST
        assert len(outer.children) == 1

        item = outer.children[0]
        assert item.kind is ElementKind.LIST_ITEM
        text, nested = item.children
        assert text.text == "1"
        assert nested.kind is ElementKind.LIST
        assert [child.text for child in nested.children] == ["1a"]

    def test_list_item_with_inline_markup_is_text_leaf(self, parser):
        item = parser.parse("<ul><li>see <strong>this</strong></li></ul>").elements[0].children[0]
        assert item.is_leaf
        assert item.text == "see this"


class TestMacros:
    """Tests for macro dispatch through the parser."""

    def test_callout_body_is_parsed(self, parser):
        markup = (
            '<ac:structured-macro ac:name="warning">'
            '<ac:parameter ac:name="title">Careful</ac:parameter>'
            '<ac:rich-text-body><p>Hot surface</p></ac:rich-text-body>'
            '</ac:structured-macro>'
        )
        macro = parser.parse(markup).elements[0]
        assert macro.kind is ElementKind.MACRO
        assert macro.name == "warning"
        assert macro.attributes["title"] == "Careful"
        assert [child.text for child in macro.children] == ["Hot surface"]

    def test_code_macro_becomes_code_element(self, parser):
        markup = (
            '<ac:structured-macro ac:name="code">'
            '<ac:parameter ac:name="language">python</ac:parameter>'
            '<ac:plain-text-body><![CDATA[if a < b:\n    pass]]></ac:plain-text-body>'
            '</ac:structured-macro>'
        )
        code = parser.parse(markup).elements[0]
        assert code.kind is ElementKind.CODE
        assert code.text == "if a < b:\n    pass"
        assert code.attributes["language"] == "python"
        assert code.attributes["isBlock"] == "true"

    def test_unknown_macro_uses_generic_handler(self, parser):
        markup = (
            '<ac:structured-macro ac:name="roadmap">'
            '<ac:parameter ac:name="lanes">3</ac:parameter>'
            '</ac:structured-macro>'
        )
        macro = parser.parse(markup).elements[0]
        assert macro.kind is ElementKind.MACRO
        assert macro.name == "roadmap"
        assert macro.attributes["lanes"] == "3"


class TestFaultIsolation:
    """A bad element never aborts the document."""

    def test_one_malformed_element_among_ten(self, parser, caplog):
        good = [f"<p>paragraph {i}</p>" for i in range(10)]
        bad = (
            '<ac:structured-macro ac:name="toc">'
            '<ac:parameter ac:name="minLevel">abc</ac:parameter>'
            '</ac:structured-macro>'
        )
        markup = "".join(good[:5]) + bad + "".join(good[5:])

        with caplog.at_level(logging.WARNING):
            document = parser.parse(markup)

        assert len(document.elements) == 11
        errors = document.errors()
        assert len(errors) == 1
        assert document.elements[5] is errors[0]
        assert errors[0].attributes["tag"] == "ac:structured-macro"
        assert errors[0].attributes["exceptionType"] == "MacroHandlerError"
        assert "minLevel" in errors[0].attributes["message"]
        assert [p.text for p in document.paragraphs()] == [f"paragraph {i}" for i in range(10)]
        assert "Failed to parse" in caplog.text

    def test_error_inside_container_keeps_siblings(self, parser):
        markup = (
            '<div><p>before</p><ac:structured-macro ac:name="toc">'
            '<ac:parameter ac:name="maxLevel">x</ac:parameter></ac:structured-macro>'
            '<p>after</p></div>'
        )
        container = parser.parse(markup).elements[0]
        assert kinds(container.children) == [ElementKind.PARAGRAPH, ElementKind.ERROR, ElementKind.PARAGRAPH]


class TestParseFailures:
    """Tests for document-level failures."""

    def test_depth_limit_raises_parse_error(self):
        parser = MarkupTreeParser(max_depth=5)
        markup = "<div>" * 10 + "deep" + "</div>" * 10
        with pytest.raises(ParseError) as exc_info:
            parser.parse(markup)
        assert exc_info.value.depth == 6

    def test_nesting_within_limit_parses(self):
        parser = MarkupTreeParser(max_depth=20)
        document = parser.parse("<div>" * 10 + "<p>deep</p>" + "</div>" * 10)
        assert [p.text for p in document.paragraphs()] == ["deep"]

    def test_unterminated_tag_raises_parse_error(self, parser):
        with pytest.raises(ParseError, match="Unterminated tag"):
            parser.parse("<p>fine</p><table")

    def test_non_string_markup_raises_parse_error(self, parser):
        with pytest.raises(ParseError):
            parser.parse(None)

    def test_empty_markup_returns_empty_document_with_warning(self, parser, caplog):
        with caplog.at_level(logging.WARNING):
            document = parser.parse("   \n ", title="Blank")
        assert document.is_empty
        assert document.title == "Blank"
        assert "Empty markup" in caplog.text

    def test_markup_without_content_warns(self, parser, caplog):
        with caplog.at_level(logging.WARNING):
            document = parser.parse("<p></p><br/>")
        assert document.is_empty
        assert "No content found" in caplog.text

    def test_invalid_max_depth(self):
        with pytest.raises(ValueError):
            MarkupTreeParser(max_depth=0)


class TestParserConfiguration:
    """Tests for parser construction helpers."""

    def test_from_settings(self):
        parser = MarkupTreeParser.from_settings(ParserSettings(max_depth=7))
        assert parser.max_depth == 7
        assert parser.features == "html.parser"

    def test_parse_document_helper(self):
        document = parse_document("<h1>A</h1>", title="T", max_depth=10)
        assert document.title == "T"
        assert kinds(document.elements) == [ElementKind.HEADING]

    def test_sample_page(self, sample_document):
        assert kinds(sample_document.elements) == [
            ElementKind.HEADING,
            ElementKind.PARAGRAPH,
            ElementKind.MACRO,
            ElementKind.HEADING,
            ElementKind.LIST,
            ElementKind.CODE,
            ElementKind.HEADING,
            ElementKind.TABLE,
            ElementKind.HEADING,
            ElementKind.PARAGRAPH,
        ]
        assert sample_document.errors() == []
