"""
Tests for the configuration system: file loading, environment overrides,
schema validation and the typed settings views.
"""

import json
import os

import pytest

from wikidoc_backend.exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
)
from wikidoc_backend.utils.config import ConfigManager, merge_configs
from wikidoc_backend.utils.config.environment import EnvironmentHandler
from wikidoc_backend.utils.config.settings import ExtractionSettings, ParserSettings, SourceSettings


def write_config(directory, data, name="wikidoc.config.json"):
    path = directory / name
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestMergeConfigs:
    def test_deep_merge(self):
        base = {"parser": {"max_depth": 100, "features": "html.parser"}, "other": 1}
        merged = merge_configs(base, {"parser": {"max_depth": 5}})
        assert merged == {"parser": {"max_depth": 5, "features": "html.parser"}, "other": 1}
        assert base["parser"]["max_depth"] == 100


class TestConfigManager:
    """Test suite for ConfigManager."""

    def test_defaults_without_file(self, tmp_path):
        manager = ConfigManager(project_root=tmp_path)
        assert manager.get("parser.max_depth") == 100
        assert manager.get("logging.level") == "INFO"
        assert manager.is_loaded

    def test_file_overrides_defaults(self, tmp_path):
        write_config(tmp_path, {"parser": {"max_depth": 12}, "extraction": {"whole_word": True}})
        manager = ConfigManager(project_root=tmp_path)
        assert manager.get("parser.max_depth") == 12
        assert manager.get("parser.features") == "html.parser"
        assert manager.get("extraction.whole_word") is True

    def test_explicit_missing_file_is_an_error(self, tmp_path):
        manager = ConfigManager(config_file="missing.json", project_root=tmp_path)
        with pytest.raises(ConfigurationFileNotFoundError):
            manager.load_config()

    def test_invalid_json(self, tmp_path):
        (tmp_path / "wikidoc.config.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            ConfigManager(project_root=tmp_path).load_config()

    def test_schema_violation(self, tmp_path):
        write_config(tmp_path, {"parser": {"max_depth": 0}})
        with pytest.raises(ConfigurationValidationError) as exc_info:
            ConfigManager(project_root=tmp_path).load_config()
        assert "parser.max_depth" in exc_info.value.invalid_fields

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        write_config(tmp_path, {"logging": {"level": "ERROR"}})
        monkeypatch.setenv("WIKIDOC_LOG_LEVEL", "debug")
        monkeypatch.setenv("WIKIDOC_MAX_DEPTH", "40")
        monkeypatch.setenv("WIKIDOC_TIMEOUT", "2.5")
        manager = ConfigManager(project_root=tmp_path)
        assert manager.get("logging.level") == "DEBUG"
        assert manager.get("parser.max_depth") == 40
        assert manager.get("source.timeout") == 2.5

    def test_dotenv_file_is_loaded(self, tmp_path):
        (tmp_path / ".env").write_text("WIKIDOC_BASE_URL=https://wiki.example.com\n", encoding="utf-8")
        try:
            manager = ConfigManager(project_root=tmp_path)
            assert manager.get("source.base_url") == "https://wiki.example.com"
        finally:
            os.environ.pop("WIKIDOC_BASE_URL", None)

    def test_bad_environment_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("WIKIDOC_MAX_DEPTH", "deep")
        with pytest.raises(EnvironmentVariableError) as exc_info:
            ConfigManager(project_root=tmp_path).load_config()
        assert exc_info.value.variable_name == "WIKIDOC_MAX_DEPTH"

    def test_get_set_has_reset(self, tmp_path):
        manager = ConfigManager(project_root=tmp_path)
        assert manager.get("parser.missing", "fallback") == "fallback"
        assert manager.has("source.base_url")
        assert not manager.has("source.nothing")

        manager.set("source.base_url", "https://wiki.example.com")
        assert manager.get("source.base_url") == "https://wiki.example.com"

        manager.reset()
        assert not manager.is_loaded
        assert manager.get("source.base_url") is None

    def test_get_returns_copies(self, tmp_path):
        manager = ConfigManager(project_root=tmp_path)
        manager.get("parser")["max_depth"] = 1
        assert manager.get("parser.max_depth") == 100


class TestEnvironmentHandler:
    def test_convert_env_value(self):
        handler = EnvironmentHandler()
        assert handler.convert_env_value("7", "integer") == 7
        assert handler.convert_env_value("yes", "boolean") is True
        assert handler.convert_env_value("Json", "lower") == "json"
        assert handler.convert_env_value("  ", "integer") is None
        with pytest.raises(EnvironmentVariableError):
            handler.convert_env_value("x", "float")


class TestSettings:
    """Tests for the typed settings views."""

    def test_from_config(self, tmp_path):
        write_config(tmp_path, {
            "parser": {"max_depth": 30},
            "extraction": {"summary_max_length": 50, "toc_max_level": 3},
            "source": {"base_url": "https://wiki.example.com", "timeout": 4},
        })
        manager = ConfigManager(project_root=tmp_path)

        assert ParserSettings.from_config(manager) == ParserSettings(max_depth=30)
        extraction = ExtractionSettings.from_config(manager)
        assert extraction.summary_max_length == 50
        assert extraction.toc_max_level == 3
        source = SourceSettings.from_config(manager)
        assert source.is_configured
        assert source.timeout == 4.0

    def test_unconfigured_source(self, tmp_path):
        assert not SourceSettings.from_config(ConfigManager(project_root=tmp_path)).is_configured
