# lspbridge/cli/main.py

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..services.logging import setup_logging
from ..config.loader import get_config
from ..core.diagnostic_aggregator import DiagnosticAggregator
from ..core.diagnostic_store import DiagnosticStore
from ..core.edit_router import EditRouter
from ..core.locations import LocationResultBuilder
from ..core.locator import DocumentLocator
from ..core.models import FileKey
from ..core.text_content import HeadlessDocument
from .headless import HeadlessShell
from .schema import CodeActionIn, LocationIn, PublishIn
from .. import __version__

app = typer.Typer(help="lspbridge CLI - inspect diagnostics, locations and code actions without an editor.")
console = Console()

def version_callback(value: bool):
    """Callback to show version and exit."""
    if value:
        console.print(f"lspbridge CLI Version: {__version__}")
        raise typer.Exit()

@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """Main callback to set up logging."""
    log_level = "DEBUG" if verbose else get_config().log_level
    setup_logging(level=log_level, verbose=verbose, log_to_file=False)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose


def _load_json(path: Path, adapter: TypeAdapter) -> Any:
    try:
        return adapter.validate_python(json.loads(path.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Could not read {path}: {e}")
        raise typer.Exit(code=1)


@app.command()
def diagnostics(
    snapshot: Path = typer.Argument(..., help="JSON list of publish events: [{file, diagnostics: [...]}].", exists=True, dir_okay=False, readable=True, resolve_path=True),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory file paths are relative to.", file_okay=False, resolve_path=True),
    open_files: Optional[List[str]] = typer.Option(None, "--open", "-o", help="Files treated as open editor tabs, in tab order."),
):
    """
    Publishes a recorded diagnostics stream and prints the capped, prioritized groups.
    """
    events = _load_json(snapshot, TypeAdapter(List[PublishIn]))
    config = get_config()
    shell = HeadlessShell(open_files=[FileKey.of(root / f) for f in open_files or []])
    locator = DocumentLocator(lambda: shell)
    store = DiagnosticStore(locator)
    for event in events:
        store.publish(event.to_model(root))

    groups = DiagnosticAggregator(locator, config).aggregate(store.snapshot())
    if not groups:
        console.print("No diagnostics.", style="green")
        return

    for group in groups:
        table = Table(title=escape(f"{group.file.name} ({group.icon})"), title_justify="left")
        table.add_column("Line", justify="right")
        table.add_column("Col", justify="right")
        table.add_column("Severity")
        table.add_column("Message")
        for item in group.diagnostics:
            table.add_row(str(item.range.start.line + 1), str(item.range.start.column + 1),
                          item.severity.name, escape(item.message))
        console.print(table)
    console.print(f"{len(groups)} of {len(store.snapshot())} file(s) shown.", style="dim")


@app.command()
def locations(
    locations_file: Path = typer.Argument(..., help="JSON list of locations: [{file, range}].", exists=True, dir_okay=False, readable=True, resolve_path=True),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory file paths are relative to.", file_okay=False, resolve_path=True),
):
    """
    Prints match previews for a list of locations, read from disk.
    """
    items = _load_json(locations_file, TypeAdapter(List[LocationIn]))
    builder = LocationResultBuilder(DocumentLocator())
    results = builder.build([loc.to_model(root) for loc in items])
    if not results:
        console.print("No results.", style="yellow")
        raise typer.Exit(code=1)

    for file, previews in results.items():
        console.print(f"[bold cyan]{escape(str(file))}[/bold cyan]")
        for preview in previews:
            console.print(f"  {preview.range.start.line + 1}: {escape(preview.line_text)}  [dim]->[/dim] [green]{escape(preview.match_text)}[/green]")


@app.command()
def apply(
    action_file: Path = typer.Argument(..., help="JSON code action: {title, changes: [{file, edits}], command}.", exists=True, dir_okay=False, readable=True, resolve_path=True),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Directory file paths are relative to.", file_okay=False, resolve_path=True),
    dry_run: bool = typer.Option(False, "--dry-run", help="Apply in memory and print the result without writing files."),
):
    """
    Applies a code action to files on disk.
    """
    action = _load_json(action_file, TypeAdapter(CodeActionIn)).to_model(root)
    shell = HeadlessShell()
    router = EditRouter(DocumentLocator(lambda: shell))
    origin = HeadlessDocument(file=None)

    if not router.apply(action, origin):
        console.print(get_config().messages.cannot_perform_fix, style="red")
        raise typer.Exit(code=1)

    if dry_run:
        for file, doc in shell.documents.items():
            if doc.modified:
                console.print(f"[bold cyan]--- {escape(str(file))}[/bold cyan]")
                console.print(doc.get_text(), markup=False, highlight=False)
        return

    written = shell.save_modified()
    for file in written:
        console.print(f"Updated {file}", style="green")
    if action.command is not None:
        console.print(f"Follow-up command (not executed headlessly): {action.command.command}", style="dim")


if __name__ == "__main__":
    app()
