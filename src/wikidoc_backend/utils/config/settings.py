"""
Typed views over the loaded configuration.

Components take these small dataclasses instead of a ConfigManager so they
stay usable without any configuration file.
"""

from dataclasses import dataclass
from typing import Optional

from .manager import ConfigManager


@dataclass(frozen=True)
class ParserSettings:
    """Settings consumed by MarkupTreeParser."""
    max_depth: int = 100
    features: str = "html.parser"

    @classmethod
    def from_config(cls, config: ConfigManager) -> "ParserSettings":
        return cls(
            max_depth=int(config.get("parser.max_depth", cls.max_depth)),
            features=config.get("parser.features", cls.features),
        )


@dataclass(frozen=True)
class ExtractionSettings:
    """Defaults for search, summaries and tables of contents."""
    summary_max_length: int = 200
    case_sensitive: bool = False
    whole_word: bool = False
    toc_min_level: int = 1
    toc_max_level: int = 6

    @classmethod
    def from_config(cls, config: ConfigManager) -> "ExtractionSettings":
        return cls(
            summary_max_length=int(config.get("extraction.summary_max_length", cls.summary_max_length)),
            case_sensitive=bool(config.get("extraction.case_sensitive", cls.case_sensitive)),
            whole_word=bool(config.get("extraction.whole_word", cls.whole_word)),
            toc_min_level=int(config.get("extraction.toc_min_level", cls.toc_min_level)),
            toc_max_level=int(config.get("extraction.toc_max_level", cls.toc_max_level)),
        )


@dataclass(frozen=True)
class SourceSettings:
    """Connection settings for HttpMarkupSource."""
    base_url: Optional[str] = None
    api_token: Optional[str] = None
    timeout: float = 30.0

    @classmethod
    def from_config(cls, config: ConfigManager) -> "SourceSettings":
        return cls(
            base_url=config.get("source.base_url"),
            api_token=config.get("source.api_token"),
            timeout=float(config.get("source.timeout", cls.timeout)),
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)
