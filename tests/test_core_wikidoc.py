"""
Essential wikidoc Core Functionality Tests

Smoke tests for the end-to-end path: markup in, document, outline and
extraction out, with configuration driving the components.
"""

import json
import shutil
import tempfile
from pathlib import Path

from wikidoc_backend.core.document_parser import (
    ContentExtractor,
    ElementKind,
    MarkupTreeParser,
    SearchOptions,
    StructureAnalyzer,
    flatten,
)
from wikidoc_backend.utils.config.manager import ConfigManager
from wikidoc_backend.utils.config.settings import ExtractionSettings, ParserSettings

PAGE = """
<h1>Release Process</h1>
<p>Every release goes through <strong>staging</strong> first.</p>
<ac:structured-macro ac:name="note">
  <ac:rich-text-body><p>Staging is reset nightly.</p></ac:rich-text-body>
</ac:structured-macro>
<h2>Checklist</h2>
<ol><li>Tag the build<ul><li>Use semantic versions</li></ul></li><li>Announce</li></ol>
<h2>Rollback</h2>
<ac:structured-macro ac:name="code">
  <ac:parameter ac:name="language">bash</ac:parameter>
  <ac:plain-text-body><![CDATA[release rollback --to previous]]></ac:plain-text-body>
</ac:structured-macro>
"""


class TestWikidocCore:
    """Essential smoke tests for wikidoc core functionality"""

    def setup_method(self):
        """Setup test environment"""
        self.temp_dir = Path(tempfile.mkdtemp())

    def teardown_method(self):
        """Cleanup test environment"""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_config_manager_loads_successfully(self):
        """ESSENTIAL: Can we load configuration?"""
        config_manager = ConfigManager(project_root=self.temp_dir)
        assert config_manager.get("parser.max_depth") == 100

    def test_parse_analyze_extract(self):
        """ESSENTIAL: Does markup become a searchable outline?"""
        document = MarkupTreeParser().parse(PAGE, title="Release")
        assert document.errors() == []
        assert len(document.headings()) == 3

        sections = StructureAnalyzer().analyze(document)
        assert [s.title for s in flatten(sections)] == ["Release Process", "Checklist", "Rollback"]

        extractor = ContentExtractor()
        assert extractor.summarize(document) == "Every release goes through staging first."
        hits = extractor.search(sections, "release", SearchOptions(whole_word=True))
        assert [hit.section.title for hit in hits] == ["Release Process", "Release Process", "Rollback"]
        assert document.find_by_kind(ElementKind.CODE)[0].attributes["language"] == "bash"

    def test_configuration_drives_components(self):
        """ESSENTIAL: Do configured settings reach the parser and extractor?"""
        (self.temp_dir / "wikidoc.config.json").write_text(
            json.dumps({"parser": {"max_depth": 50}, "extraction": {"summary_max_length": 5}}),
            encoding="utf-8",
        )
        config_manager = ConfigManager(project_root=self.temp_dir)

        parser = MarkupTreeParser.from_settings(ParserSettings.from_config(config_manager))
        extractor = ContentExtractor(ExtractionSettings.from_config(config_manager))

        assert parser.max_depth == 50
        assert extractor.summarize(parser.parse(PAGE)) == "Every..."
