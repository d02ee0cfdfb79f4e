"""
Document commands for wikidoc CLI.

Parse a local storage-format markup file and show its elements, outline,
table of contents, search hits, text, summary or structured data.
"""

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ..core.document_parser import (
    ContentExtractor,
    Document,
    ElementKind,
    MarkupTreeParser,
    SearchOptions,
    SearchResult,
    Section,
    StructureAnalyzer,
    find_by_id,
    path_string,
)
from ..exceptions.parse_exceptions import ParseError
from ..utils.config import ConfigManager
from ..utils.config.settings import ExtractionSettings, ParserSettings

console = Console()
logger = logging.getLogger(__name__)

document_app = typer.Typer(
    name="doc",
    help="Commands working on local markup files",
    rich_markup_mode="rich",
)


def get_config(ctx: typer.Context) -> ConfigManager:
    """The configuration loaded by the main callback, or a fresh one."""
    if ctx.obj and ctx.obj.get("config_manager") is not None:
        return ctx.obj["config_manager"]
    return ConfigManager()


def build_parser(config: ConfigManager) -> MarkupTreeParser:
    return MarkupTreeParser.from_settings(ParserSettings.from_config(config))


def build_extractor(config: ConfigManager) -> ContentExtractor:
    return ContentExtractor(ExtractionSettings.from_config(config))


def load_document(ctx: typer.Context, file: Path, title: Optional[str] = None) -> Document:
    """Read and parse a markup file, exiting with status 1 on failure."""
    try:
        markup = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        rprint(f"[red]Error:[/red] cannot read {escape(str(file))}: {escape(str(e))}")
        raise typer.Exit(1)

    try:
        return build_parser(get_config(ctx)).parse(markup, title if title is not None else file.stem)
    except ParseError as e:
        logger.error(f"Parsing {file} failed: {e}")
        rprint(f"[red]Parse Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def parse_kinds(kinds: Optional[List[str]]) -> Optional[frozenset]:
    """Turn ``--kind`` values into ElementKinds."""
    if not kinds:
        return None
    try:
        return frozenset(ElementKind(kind.lower()) for kind in kinds)
    except ValueError:
        valid = ", ".join(kind.value for kind in ElementKind)
        raise typer.BadParameter(f"unknown kind in {kinds}; expected one of: {valid}")


def select_section(sections: Sequence[Section], section_id: str) -> Section:
    section = find_by_id(sections, section_id)
    if section is None:
        rprint(f"[red]Error:[/red] no section with id {escape(section_id)!r}")
        raise typer.Exit(1)
    return section


def echo_json(data: Any) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def format_kind_counts(document: Document, counts: Counter) -> Table:
    """Element counts per kind as a rich table."""
    table = Table(title=f"Elements in: {document.title}" if document.title else "Elements")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right", style="green")
    for kind in ElementKind:
        if counts.get(kind):
            table.add_row(kind.value, str(counts[kind]))
    return table


def build_outline_tree(title: str, sections: Sequence[Section]) -> Tree:
    """Render a section tree as a rich Tree."""
    tree = Tree(f"[bold blue]{escape(title or 'Document')}[/bold blue]")
    stack = [(tree, section) for section in reversed(sections)]
    while stack:
        parent, section = stack.pop()
        label = f"{escape(section.title)} [dim]#{escape(section.section_id)}[/dim]"
        if section.level:
            label = f"[cyan]H{section.level}[/cyan] {label}"
        node = parent.add(label)
        stack.extend((node, subsection) for subsection in reversed(section.subsections))
    return tree


def format_search_results(results: Sequence[SearchResult], query: str) -> Table:
    """Format search results as a rich table."""
    table = Table(title=f"Search Results for: {query}")
    table.add_column("#", justify="right", style="bold green", width=4)
    table.add_column("Section", style="cyan")
    table.add_column("Kind", style="blue")
    table.add_column("Matches", justify="right", style="bright_yellow")
    table.add_column("Snippet", style="white")
    for i, result in enumerate(results, start=1):
        section = path_string(result.section) if result.section is not None else ""
        table.add_row(
            str(i),
            escape(section),
            result.element.kind.value,
            str(result.match_count),
            escape(result.snippet()),
        )
    return table


def search_result_to_dict(result: SearchResult) -> Dict[str, Any]:
    return {
        "section": result.section.section_id if result.section is not None else None,
        "kind": result.element.kind.value,
        "text": result.text,
        "matches": [list(span) for span in result.matches],
    }


@document_app.command("parse")
def parse(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file to parse"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Document title (default: file name)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full element tree as JSON"),
) -> None:
    """
    Parse a markup file and show what it contains.

    Example:
        wikidoc doc parse page.xml --json
    """
    document = load_document(ctx, file, title)

    if as_json:
        echo_json(document.to_dict())
        return

    counts = build_extractor(get_config(ctx)).count_kinds(document)
    console.print(format_kind_counts(document, counts))
    rprint(f"\n[green]{len(document)} top-level elements[/green]")

    errors = document.errors()
    if errors:
        rprint(f"[yellow]{len(errors)} element(s) could not be parsed:[/yellow]")
        for element in errors:
            rprint(f"  • <{escape(element.attributes.get('tag', '?'))}> {escape(element.attributes.get('message', ''))}")


@document_app.command("outline")
def outline(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file to analyze"),
    as_json: bool = typer.Option(False, "--json", help="Print the section tree as JSON"),
) -> None:
    """Show the section outline derived from the headings."""
    document = load_document(ctx, file)
    sections = StructureAnalyzer().analyze(document)

    if as_json:
        echo_json([section.to_dict(include_content=False) for section in sections])
        return
    console.print(build_outline_tree(document.title, sections))


@document_app.command("toc")
def toc(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file to analyze"),
    min_level: Optional[int] = typer.Option(None, "--min-level", min=1, max=6, help="Shallowest heading level"),
    max_level: Optional[int] = typer.Option(None, "--max-level", min=1, max=6, help="Deepest heading level"),
    as_json: bool = typer.Option(False, "--json", help="Print the table of contents as JSON"),
) -> None:
    """Show the table of contents restricted to a range of heading levels."""
    document = load_document(ctx, file)
    try:
        entries = build_extractor(get_config(ctx)).table_of_contents(document, min_level, max_level)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if as_json:
        echo_json([entry.to_dict(include_content=False) for entry in entries])
        return
    if not entries:
        rprint("[yellow]No headings in the requested range[/yellow]")
        return
    console.print(build_outline_tree(document.title, entries))


@document_app.command("search")
def search(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file to search"),
    query: str = typer.Argument(..., help="Literal text to look for"),
    case_sensitive: bool = typer.Option(False, "--case-sensitive", help="Match case exactly"),
    whole_word: bool = typer.Option(False, "--whole-word", "-w", help="Only match whole words"),
    kinds: Optional[List[str]] = typer.Option(
        None,
        "--kind",
        "-k",
        help="Restrict to elements of this kind or inside it (repeatable)",
    ),
    section_id: Optional[str] = typer.Option(None, "--section", "-s", help="Only search this section"),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """
    Search a document for literal text.

    Example:
        wikidoc doc search page.xml "deploy" --whole-word --kind table
    """
    include_kinds = parse_kinds(kinds)
    document = load_document(ctx, file)
    extractor = build_extractor(get_config(ctx))

    defaults = extractor.default_search_options()
    options = SearchOptions(
        case_sensitive=case_sensitive or defaults.case_sensitive,
        whole_word=whole_word or defaults.whole_word,
        include_kinds=include_kinds,
    )

    sections = extractor.analyzer.analyze(document)
    scope = [select_section(sections, section_id)] if section_id else sections
    results = extractor.search(scope, query, options)

    if as_json:
        echo_json([search_result_to_dict(result) for result in results])
        return
    if not results:
        rprint("[yellow]No results found[/yellow]")
        return
    console.print(format_search_results(results, query))
    rprint(f"\n[green]Found {len(results)} matching elements[/green]")


@document_app.command("text")
def text(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file"),
    section_id: Optional[str] = typer.Option(None, "--section", "-s", help="Only this section"),
) -> None:
    """Print the plain text of a document or one of its sections."""
    document = load_document(ctx, file)
    extractor = build_extractor(get_config(ctx))
    if section_id:
        scope = select_section(extractor.analyzer.analyze(document), section_id)
    else:
        scope = document
    typer.echo(extractor.extract_text(scope))


@document_app.command("summary")
def summary(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file"),
    max_length: Optional[int] = typer.Option(None, "--max-length", "-n", min=1, help="Maximum summary length"),
    section_id: Optional[str] = typer.Option(None, "--section", "-s", help="Summarize this section"),
) -> None:
    """Print a short summary: the first paragraph, truncated."""
    document = load_document(ctx, file)
    extractor = build_extractor(get_config(ctx))
    if section_id:
        scope = select_section(extractor.analyzer.analyze(document), section_id)
    else:
        scope = document
    typer.echo(extractor.summarize(scope, max_length))


@document_app.command("data")
def data(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Markup file"),
    section_id: Optional[str] = typer.Option(None, "--section", "-s", help="Limit to this section"),
) -> None:
    """Print the tables, lists and headings as JSON."""
    document = load_document(ctx, file)
    extractor = build_extractor(get_config(ctx))
    if section_id:
        scope = select_section(extractor.analyzer.analyze(document), section_id)
    else:
        scope = document
    echo_json(extractor.structured_data(scope).to_dict())
