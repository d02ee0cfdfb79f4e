"""
wikidoc CLI Package.

Command-line interface for parsing storage-format markup files, inspecting
their outline and extracting content, locally or from a wiki server.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
