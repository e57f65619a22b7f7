"""
Chat Archive CLI Application.

Command-line entry point for validating, inspecting and re-rendering
conversation archive markdown files.

Commands:
- validate: check an archive and list every issue
- parse: print the structured document as JSON or tables
- render: regenerate canonical markdown from an archive
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .. import __version__
from ..core.archive_processor import ArchiveParser, MarkdownGenerator
from ..core.validation import ParseResult, get_schema_registry
from ..exceptions.config_exceptions import ConfigurationError
from ..models.archive_schema import ArchiveDocument
from ..utils.config import ConfigManager
from ..utils.logging_config import LogFormat, configure_logging

# Results go to stdout, logs to stderr
console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="chat-archive",
    help="Validate, inspect and render conversation archive markdown",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
    pretty_exceptions_show_locals=False,
)

class OutputFormat(str, Enum):
    JSON = "json"
    TABLE = "table"


def setup_logging(
    verbose: bool = False,
    level: str = "WARNING",
    fmt: str = "standard",
) -> logging.Logger:
    """
    Set up logging for a CLI run.
    
    Args:
        verbose: Force DEBUG level
        level: Level from configuration
        fmt: ``standard`` for rich console output or ``json`` for log collectors
        
    Returns:
        Configured package logger
    """
    log_level = "DEBUG" if verbose else level
    if LogFormat(fmt) is LogFormat.JSON:
        return configure_logging(log_level, LogFormat.JSON)
    
    rich_handler = RichHandler(
        console=err_console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    return configure_logging(log_level, handler=rich_handler)


def load_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """
    Create and load the configuration manager for this run.
    
    Raises:
        typer.Exit: If configuration loading fails
    """
    try:
        config_manager = ConfigManager(config_file=config_path, load_env=True)
        config_manager.load_config()
    except ConfigurationError as e:
        rprint(f"[red]Configuration Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    return config_manager


def build_parser(config_manager: ConfigManager) -> ArchiveParser:
    schema_dir = config_manager.schema_dir()
    return ArchiveParser(
        policies=config_manager.parse_policies(),
        schema_registry=get_schema_registry(str(schema_dir)) if schema_dir else None,
    )


def parse_file(ctx: typer.Context, file: Path) -> ParseResult:
    """
    Read and parse one archive file.
    
    Raises:
        typer.Exit: If the file cannot be read or the archive schema cannot be loaded
    """
    try:
        parser = build_parser(ctx.obj["config_manager"])
        return parser.parse(file.read_text(encoding="utf-8"))
    except (ConfigurationError, OSError, UnicodeDecodeError) as e:
        handle_cli_error(e)
        raise typer.Exit(1)


def print_issues(file: Path, result: ParseResult) -> None:
    count = len(result.issues)
    rprint(f"[red]✗[/red] {escape(str(file))}: {count} issue{'s' if count != 1 else ''} found")
    for number, issue in enumerate(result.issues, 1):
        rprint(f"  {number}. [yellow]{issue.kind}[/yellow] {escape(issue.message)}")


def document_tables(document: ArchiveDocument) -> list:
    metadata = Table(title=document.title, show_header=False)
    metadata.add_column("Field", style="cyan")
    metadata.add_column("Value")
    for key, value in document.metadata.to_dict().items():
        if key == "tags":
            value = ", ".join(value)
        metadata.add_row(key, escape("" if value is None else str(value)))
    
    artifacts = Table(title="Artifacts")
    artifacts.add_column("Title", style="cyan")
    artifacts.add_column("Type")
    artifacts.add_column("Language")
    artifacts.add_column("Version")
    artifacts.add_column("Lines", justify="right", style="green")
    for artifact in document.artifacts:
        artifacts.add_row(
            escape(artifact.title),
            escape(artifact.type),
            escape(artifact.language or ""),
            escape(artifact.version or ""),
            str(len(artifact.content.splitlines())),
        )
    
    attachments = Table(title="Attachments")
    attachments.add_column("Filename", style="cyan")
    attachments.add_column("Summarized")
    attachments.add_column("Original size")
    for attachment in document.attachments:
        attachments.add_row(
            escape(attachment.filename),
            "yes" if attachment.is_summarized else "no",
            escape(attachment.original_size or ""),
        )
    
    return [metadata, artifacts, attachments]


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file (default: chatarchive.config.json)",
        metavar="PATH",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
) -> None:
    """
    Chat Archive CLI - work with conversation archive markdown files.
    
    Common workflows:
    • Check a file: chat-archive validate archive.md
    • Inspect it: chat-archive parse archive.md --output table
    • Normalize it: chat-archive render archive.md --out clean.md
    """
    config_manager = load_config_manager(config_path)
    logger = setup_logging(
        verbose,
        level=config_manager.get("logging.level", "WARNING"),
        fmt=config_manager.get("logging.format", "standard"),
    )
    ctx.obj = {
        "config_manager": config_manager,
        "verbose": verbose,
        "logger": logger,
    }


@app.command()
def validate(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Archive markdown file"),
) -> None:
    """Validate an archive and list every issue found."""
    result = parse_file(ctx, file)
    if not result.is_valid:
        print_issues(file, result)
        raise typer.Exit(1)
    
    document = result.document
    rprint(
        f"[green]✓[/green] {escape(str(file))}: valid archive '{escape(document.title)}' "
        f"({len(document.artifacts)} artifacts, {len(document.attachments)} attachments, "
        f"{len(document.workarounds)} workarounds)"
    )


@app.command()
def parse(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Archive markdown file"),
    output: OutputFormat = typer.Option(
        OutputFormat.JSON,
        "--output",
        "-o",
        help="Output format: json or table",
    ),
) -> None:
    """Parse an archive and print the structured document."""
    result = parse_file(ctx, file)
    if not result.is_valid:
        print_issues(file, result)
        raise typer.Exit(1)
    
    if output is OutputFormat.JSON:
        typer.echo(json.dumps(result.document.to_dict(), indent=2, ensure_ascii=False))
    else:
        for table in document_tables(result.document):
            console.print(table)


@app.command()
def render(
    ctx: typer.Context,
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Archive markdown file"),
    summary_only: bool = typer.Option(
        False,
        "--summary-only",
        help="Render only the title block and the summary sections",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        help="Write the rendered markdown to this file instead of stdout",
        metavar="PATH",
    ),
) -> None:
    """Parse an archive and regenerate it as canonical markdown."""
    result = parse_file(ctx, file)
    if not result.is_valid:
        print_issues(file, result)
        raise typer.Exit(1)
    
    markdown = MarkdownGenerator().generate(result.document, summary_only=summary_only)
    if out is None:
        typer.echo(markdown, nl=False)
        return
    
    out.write_text(markdown, encoding="utf-8")
    rprint(f"[green]✓[/green] Wrote {escape(str(out))}")


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"Chat Archive [blue]v{__version__}[/blue]")


def handle_cli_error(error: Exception) -> None:
    """
    Handle CLI errors with user-friendly messages.
    
    Args:
        error: The exception that occurred
    """
    logger = logging.getLogger(__name__)
    
    if isinstance(error, ConfigurationError):
        rprint(f"[red]Configuration Error:[/red] {escape(str(error))}")
        logger.debug("Configuration error details", exc_info=True)
    elif isinstance(error, UnicodeDecodeError):
        rprint(f"[red]Encoding Error:[/red] archive files must be UTF-8 ({escape(str(error))})")
        logger.debug("Decode error details", exc_info=True)
    elif isinstance(error, PermissionError):
        rprint(f"[red]Permission Denied:[/red] {escape(str(error))}")
        logger.debug("Permission error details", exc_info=True)
    else:
        rprint(f"[red]Error:[/red] {escape(str(error))}")
        logger.debug("Unexpected error details", exc_info=True)


def cli_main() -> None:
    """
    Main CLI entry point with error handling.
    
    This function is called by the console script entry point.
    """
    try:
        app()
    except KeyboardInterrupt:
        rprint("\n[yellow]Operation cancelled by user[/yellow]")
        raise SystemExit(130)
    except Exception as e:
        handle_cli_error(e)
        raise SystemExit(1)


if __name__ == "__main__":
    cli_main()
