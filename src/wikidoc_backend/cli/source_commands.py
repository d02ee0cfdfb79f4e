"""
Source commands for wikidoc CLI.

Fetch pages from a wiki server and show them like local files.
"""

import logging

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape

from ..core.document_parser import Document, StructureAnalyzer
from ..core.markup_source import HttpMarkupSource, page_id_from_url
from ..core.page_loader import PageLoader
from ..exceptions.parse_exceptions import ParseError
from ..exceptions.source_exceptions import DocumentNotFoundError, MarkupSourceError
from ..utils.config.settings import SourceSettings
from .document_commands import (
    build_extractor,
    build_outline_tree,
    build_parser,
    echo_json,
    format_kind_counts,
    get_config,
)

console = Console()
logger = logging.getLogger(__name__)

source_app = typer.Typer(
    name="source",
    help="Commands fetching pages from a wiki server",
    rich_markup_mode="rich",
)


def build_loader(ctx: typer.Context) -> PageLoader:
    """A PageLoader for the configured server, exiting when none is set."""
    config = get_config(ctx)
    settings = SourceSettings.from_config(config)
    if not settings.is_configured:
        rprint("[red]Error:[/red] no wiki server configured (set WIKIDOC_BASE_URL or source.base_url)")
        raise typer.Exit(1)
    return PageLoader(HttpMarkupSource.from_settings(settings), parser=build_parser(config))


def resolve_page_id(page: str) -> str:
    """Accept a numeric page id or a page URL."""
    if page.isdigit():
        return page
    page_id = page_id_from_url(page)
    if page_id is None:
        raise typer.BadParameter(f"cannot find a page id in {page!r}")
    return page_id


def fetch_document(ctx: typer.Context, page: str) -> Document:
    page_id = resolve_page_id(page)
    loader = build_loader(ctx)
    try:
        return loader.load(page_id)
    except DocumentNotFoundError as e:
        rprint(f"[red]Not Found:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except (MarkupSourceError, ParseError) as e:
        logger.error(f"Loading page {page_id} failed: {e}")
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@source_app.command("fetch")
def fetch(
    ctx: typer.Context,
    page: str = typer.Argument(..., help="Page id or page URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the full element tree as JSON"),
) -> None:
    """
    Fetch a page and show what it contains.

    Example:
        wikidoc source fetch https://example.atlassian.net/wiki/spaces/DOC/pages/123456
    """
    document = fetch_document(ctx, page)
    if as_json:
        echo_json(document.to_dict())
        return
    counts = build_extractor(get_config(ctx)).count_kinds(document)
    console.print(format_kind_counts(document, counts))


@source_app.command("outline")
def outline(
    ctx: typer.Context,
    page: str = typer.Argument(..., help="Page id or page URL"),
) -> None:
    """Fetch a page and show its section outline."""
    document = fetch_document(ctx, page)
    console.print(build_outline_tree(document.title, StructureAnalyzer().analyze(document)))
