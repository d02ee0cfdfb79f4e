"""Shared test fixtures and configuration for wikidoc backend tests."""

import logging
import os

import pytest

from wikidoc_backend.core.document_parser import MarkupTreeParser, StructureAnalyzer


SAMPLE_PAGE = """
<h1 id="overview">Overview</h1>
<p>The <strong>deploy</strong> service ships builds to production.</p>
<ac:structured-macro ac:name="info">
  <ac:parameter ac:name="title">Heads up</ac:parameter>
  <ac:rich-text-body><p>Deploys are frozen on Fridays.</p></ac:rich-text-body>
</ac:structured-macro>
<h2>Setup</h2>
<ul><li>Install the CLI</li><li>Request access</li></ul>
<ac:structured-macro ac:name="code">
  <ac:parameter ac:name="language">bash</ac:parameter>
  <ac:plain-text-body><![CDATA[deploy --env prod
deploy --status]]></ac:plain-text-body>
</ac:structured-macro>
<h2>Contacts</h2>
<table>
  <tbody>
    <tr><th>Team</th><th>Channel</th></tr>
    <tr><td>Platform</td><td><a href="https://chat.example.com/platform">#platform</a></td></tr>
  </tbody>
</table>
<h1>Appendix</h1>
<p>See <ac:link><ri:page ri:content-title="Release Notes" /></ac:link> for history.</p>
"""


@pytest.fixture(autouse=True)
def clean_wikidoc_environment(monkeypatch):
    """Keep WIKIDOC_* variables out of tests and restore root logging afterwards."""
    for name in list(os.environ):
        if name.startswith("WIKIDOC_"):
            monkeypatch.delenv(name, raising=False)

    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)


@pytest.fixture
def parser():
    """Provide a parser with the built-in macro handlers."""
    return MarkupTreeParser()


@pytest.fixture
def analyzer():
    return StructureAnalyzer()


@pytest.fixture
def sample_markup():
    """Provide a representative storage-format page."""
    return SAMPLE_PAGE


@pytest.fixture
def sample_document(parser, sample_markup):
    return parser.parse(sample_markup, title="Deploy Guide")


@pytest.fixture
def sample_sections(analyzer, sample_document):
    return analyzer.analyze(sample_document)


@pytest.fixture
def markup_file(tmp_path, sample_markup):
    """Write the sample page to a file and return its path."""
    path = tmp_path / "deploy-guide.xml"
    path.write_text(sample_markup, encoding="utf-8")
    return path
