"""
Built-in configuration defaults and the JSON schema they satisfy.

Every key a wikidoc component reads is present here, so a missing
configuration file is never an error.
"""

from typing import Any, Dict


DEFAULT_CONFIG: Dict[str, Any] = {
    "parser": {
        "max_depth": 100,
        "features": "html.parser",
    },
    "extraction": {
        "summary_max_length": 200,
        "case_sensitive": False,
        "whole_word": False,
        "toc_min_level": 1,
        "toc_max_level": 6,
    },
    "source": {
        "base_url": None,
        "api_token": None,
        "timeout": 30.0,
    },
    "logging": {
        "level": "INFO",
        "format": "standard",
        "file": None,
    },
}


CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "parser": {
            "type": "object",
            "properties": {
                "max_depth": {"type": "integer", "minimum": 1},
                "features": {"type": "string", "minLength": 1},
            },
        },
        "extraction": {
            "type": "object",
            "properties": {
                "summary_max_length": {"type": "integer", "minimum": 1},
                "case_sensitive": {"type": "boolean"},
                "whole_word": {"type": "boolean"},
                "toc_min_level": {"type": "integer", "minimum": 0, "maximum": 6},
                "toc_max_level": {"type": "integer", "minimum": 0, "maximum": 6},
            },
        },
        "source": {
            "type": "object",
            "properties": {
                "base_url": {"type": ["string", "null"]},
                "api_token": {"type": ["string", "null"]},
                "timeout": {"type": "number", "exclusiveMinimum": 0},
            },
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {
                    "type": "string",
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
                "format": {
                    "type": "string",
                    "enum": ["standard", "json", "detailed"],
                },
                "file": {"type": ["string", "null"]},
            },
        },
    },
}
