"""
wikidoc CLI Application.

Main entry point for the wikidoc command-line interface. Command groups:
``doc`` works on local markup files, ``source`` fetches pages from a wiki.
"""

import logging
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from ..exceptions.config_exceptions import ConfigurationError
from ..exceptions.parse_exceptions import ParseError
from ..exceptions.source_exceptions import MarkupSourceError
from ..utils.config import ConfigManager
from ..utils.logging_config import LogFormat, configure_logging
from .document_commands import document_app
from .source_commands import source_app

__version__ = "0.1.0"

console = Console()
# Log records go to stderr so command output stays machine-readable.
error_console = Console(stderr=True)

app = typer.Typer(
    name="wikidoc",
    help="Parse wiki storage-format markup into structured documents",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(document_app, name="doc", help="Commands working on local markup files")
app.add_typer(source_app, name="source", help="Commands fetching pages from a wiki server")

# Global state
_config_manager: Optional[ConfigManager] = None
_logger: Optional[logging.Logger] = None


def setup_logging(
    verbose: bool = False,
    json_logs: bool = False,
    config_manager: Optional[ConfigManager] = None,
) -> logging.Logger:
    """
    Set up logging for a CLI run.

    The level and format come from the configuration unless overridden by
    ``--verbose`` or ``--json-logs``.

    Args:
        verbose: Enable verbose (DEBUG) logging
        json_logs: Emit log records as JSON lines
        config_manager: Loaded configuration, if any

    Returns:
        Configured logger instance
    """
    level = "INFO"
    log_format = LogFormat.STANDARD
    log_file = None
    if config_manager is not None:
        level = config_manager.get("logging.level", level)
        log_format = LogFormat(config_manager.get("logging.format", log_format.value))
        log_file = config_manager.get("logging.file")
    if verbose:
        level = "DEBUG"
    if json_logs:
        log_format = LogFormat.JSON

    rich_handler = RichHandler(
        console=error_console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    configure_logging(level, log_format, log_file=log_file, console_handler=rich_handler)

    return logging.getLogger("wikidoc_backend")


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """
    Get or create the global configuration manager.

    Args:
        config_path: Optional path to configuration file

    Returns:
        ConfigManager instance

    Raises:
        typer.Exit: If configuration loading fails
    """
    global _config_manager

    if _config_manager is None or config_path:
        try:
            _config_manager = ConfigManager(config_file=config_path, load_env=True)
            _config_manager.load_config()
        except ConfigurationError as e:
            rprint(f"[red]Configuration Error:[/red] {escape(str(e))}")
            raise typer.Exit(1)

    return _config_manager


def reset_state() -> None:
    """Forget the cached configuration manager and logger."""
    global _config_manager, _logger
    _config_manager = None
    _logger = None


def get_logger() -> logging.Logger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config-path",
        "-c",
        help="Path to configuration file (default: wikidoc.config.json)",
        metavar="PATH",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write log records as JSON lines",
    ),
) -> None:
    """
    wikidoc - parse wiki storage-format markup.

    Common workflows:
    • Inspect a page: wikidoc doc outline page.xml
    • Search a page: wikidoc doc search page.xml "deployment"
    • Fetch from a server: wikidoc source fetch 123456

    For detailed help on any command, use: wikidoc <command> --help
    """
    global _logger
    reset_state()
    config_manager = get_config_manager(config_path)
    _logger = setup_logging(verbose, json_logs, config_manager)

    ctx.obj = {
        "config_path": config_path,
        "verbose": verbose,
        "config_manager": config_manager,
        "logger": _logger,
    }


@app.command()
def info() -> None:
    """Show configuration status."""
    config_manager = get_config_manager()
    config = config_manager.config

    info_text = Text()
    info_text.append("wikidoc Information\n\n", style="bold blue")
    info_text.append(f"Version: {__version__}\n")
    info_text.append(f"Config file: {config_manager.config_file}\n")
    info_text.append(f"Project root: {config_manager.project_root}\n")
    info_text.append(f"Loaded: {'✓' if config_manager.is_loaded else '✗'}\n\n")

    info_text.append("Configuration:\n", style="bold")
    info_text.append(f"• Max nesting depth: {config.get('parser', {}).get('max_depth')}\n")
    info_text.append(f"• Tree builder: {config.get('parser', {}).get('features')}\n")
    info_text.append(f"• Summary length: {config.get('extraction', {}).get('summary_max_length')}\n")
    base_url = config.get("source", {}).get("base_url") or "not configured"
    info_text.append(f"• Wiki server: {base_url}\n")

    console.print(Panel(info_text, title="System Information", border_style="blue"))


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"wikidoc [blue]v{__version__}[/blue]")


def handle_cli_error(error: Exception) -> None:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
    """
    logger = get_logger()
    message = escape(str(error))

    if isinstance(error, ConfigurationError):
        rprint(f"[red]Configuration Error:[/red] {message}")
        logger.debug("Configuration error details", exc_info=True)
    elif isinstance(error, ParseError):
        rprint(f"[red]Parse Error:[/red] {message}")
        logger.debug("Parse error details", exc_info=True)
    elif isinstance(error, MarkupSourceError):
        rprint(f"[red]Source Error:[/red] {message}")
        logger.debug("Source error details", exc_info=True)
    elif isinstance(error, FileNotFoundError):
        rprint(f"[red]File Not Found:[/red] {message}")
        logger.debug("File not found details", exc_info=True)
    else:
        rprint(f"[red]Error:[/red] {message}")
        logger.debug("Unexpected error details", exc_info=True)


def cli_main() -> None:
    """
    Main CLI entry point with error handling.

    This function is called by the console script entry point.
    """
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        rprint("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        handle_cli_error(e)
        raise typer.Exit(1)


if __name__ == "__main__":
    cli_main()
