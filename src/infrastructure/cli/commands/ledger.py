"""Progress ledger inspection commands."""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.table import Table

from src.domain.errors import ConfigurationError, CorruptLedger
from src.infrastructure.adapters.ledger_store import GzipLedgerStore
from src.infrastructure.cli.commands.sync import CONFIG_OPTION, load_settings, resolve_ledger_path
from src.infrastructure.logging import configure_logging

app = typer.Typer(help="Inspect the progress ledger of the configured account")
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def path(config_path: str = CONFIG_OPTION) -> None:
    """Print the ledger file path for the configured credential."""
    configure_logging(logging.WARNING)
    settings = load_settings(config_path)
    try:
        console.print(str(resolve_ledger_path(settings)), soft_wrap=True)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)


@app.command()
def show(
    config_path: str = CONFIG_OPTION,
    limit: int = typer.Option(50, "--limit", "-n", help="Maximum number of identifiers to list (0 for all)"),
) -> None:
    """List identifiers of items already synchronized."""
    configure_logging(logging.WARNING)
    settings = load_settings(config_path)

    try:
        ledger_path = resolve_ledger_path(settings)
        identifiers = GzipLedgerStore().read(ledger_path)
    except (ConfigurationError, CorruptLedger) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    if identifiers is None:
        console.print(f"[yellow]No ledger yet at {ledger_path}[/yellow]")
        return

    ordered = sorted(identifiers)
    shown = ordered if limit <= 0 else ordered[:limit]

    table = Table(title=f"Completed items ({len(ordered)})", show_header=True, header_style="bold magenta")
    table.add_column("Item ID", style="cyan")
    for item_id in shown:
        table.add_row(item_id)
    console.print(table)

    if len(shown) < len(ordered):
        console.print(f"[dim]... and {len(ordered) - len(shown)} more (use --limit 0 to list all)[/dim]")
