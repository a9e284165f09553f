"""Catalog synchronization commands."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import typer
from rich.console import Console

from src.application.use_cases.sync_catalog import sync_catalog
from src.domain.errors import CatalogAuthError, CatalogError, ConfigurationError, CorruptLedger, LedgerWriteError
from src.infrastructure.adapters.desktop_notifier import DesktopNotifier
from src.infrastructure.adapters.exiftool_tagger import ExifToolTaggerAdapter
from src.infrastructure.adapters.flickr_catalog import FlickrCatalogAdapter
from src.infrastructure.adapters.httpx_fetcher import HttpxAssetFetcher
from src.infrastructure.adapters.ledger_store import GzipLedgerStore, ledger_path_for
from src.infrastructure.adapters.rich_progress_reporter import RichProgressReporterAdapter
from src.infrastructure.config.environment import require_api_key
from src.infrastructure.config.settings import DEFAULT_CONFIG_PATH, Settings
from src.infrastructure.logging import configure_logging, set_correlation_id

app = typer.Typer(help="Download and tag photos from Flickr")
console = Console()
logger = logging.getLogger(__name__)

CONFIG_OPTION = typer.Option(
    DEFAULT_CONFIG_PATH,
    "--config",
    envvar="FLICKSYNC_CONFIG",
    help="Path to flicksync.toml configuration file",
)


def load_settings(config_path: str) -> Settings:
    try:
        return Settings.from_toml(config_path)
    except Exception as e:
        console.print(f"[red]Error loading configuration {config_path}: {e}[/red]")
        raise typer.Exit(code=1)


def build_catalog(settings: Settings) -> tuple[FlickrCatalogAdapter, str]:
    """
    Create the Flickr catalog client for the configured identity.

    Returns:
        (catalog adapter, auth token) - the token keys the ledger file
    """
    flickr = settings.flickr
    api_key = flickr.api_key or require_api_key("FLICKR_API_KEY", context="to access Flickr")
    api_secret = flickr.api_secret or require_api_key("FLICKR_API_SECRET", context="to sign Flickr requests")
    auth_token = flickr.resolve_auth_token()

    catalog = FlickrCatalogAdapter(
        api_key=api_key,
        api_secret=api_secret,
        auth_token=auth_token,
        base_url=flickr.base_url,
        per_page=flickr.per_page,
        timeout_seconds=flickr.timeout_seconds,
    )
    return catalog, auth_token


def resolve_ledger_path(settings: Settings) -> Path:
    return ledger_path_for(settings.flickr.resolve_auth_token(), settings.paths.ledger_path())


@app.command()
def run(
    output_dir: str | None = typer.Argument(None, help="Directory for downloaded files (defaults to paths.output_dir)"),
    config_path: str = CONFIG_OPTION,
    include_private: bool = typer.Option(False, "--include-private", help="Also download items that are not public"),
    skip_existing: bool | None = typer.Option(
        None,
        "--skip-existing/--no-skip-existing",
        help="Treat files already present in the output directory as done",
    ),
    notify: bool | None = typer.Option(None, "--notify/--no-notify", help="Show a desktop notification at the end"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug and HTTP request logs"),
) -> None:
    """
    Download every photo not yet synchronized and write its metadata as embedded tags.

    Completed photos are recorded in a per-account ledger, so an interrupted
    run resumes where it stopped and a repeated run downloads nothing new.

    Examples:
        flicksync sync run
        flicksync sync run ~/Pictures/flickr --no-notify
    """
    configure_logging(logging.INFO, verbose=verbose)
    correlation_id = str(uuid.uuid4())
    set_correlation_id(correlation_id)

    settings = load_settings(config_path)
    destination = Path(output_dir).expanduser().resolve() if output_dir else settings.paths.output_path()
    public_only = settings.sync.public_only and not include_private
    skip_existing_files = settings.sync.skip_existing_files if skip_existing is None else skip_existing
    notify_enabled = settings.sync.notify if notify is None else notify

    progress_reporter = RichProgressReporterAdapter()
    fetcher = HttpxAssetFetcher(
        timeout_seconds=settings.download.timeout_seconds,
        chunk_size=settings.download.chunk_size,
    )
    catalog: FlickrCatalogAdapter | None = None

    try:
        catalog, auth_token = build_catalog(settings)
        username = catalog.check_login()
        console.print(f"Logged in as [bold]{username}[/bold]")

        ledger_path = ledger_path_for(auth_token, settings.paths.ledger_path())
        console.print(f"Saving to {destination}")

        result = sync_catalog(
            catalog=catalog,
            fetcher=fetcher,
            tagger=ExifToolTaggerAdapter(exiftool_path=settings.tagging.exiftool_path),
            ledger_store=GzipLedgerStore(),
            ledger_path=ledger_path,
            output_dir=destination,
            progress_reporter=progress_reporter,
            notifier=DesktopNotifier() if notify_enabled else None,
            public_only=public_only,
            skip_existing_files=skip_existing_files,
            correlation_id=correlation_id,
        )
    except CatalogAuthError as e:
        progress_reporter.cleanup()
        console.print(f"[red]Authentication failed: {e}[/red]")
        console.print("[yellow]Check FLICKR_API_KEY, FLICKR_API_SECRET and the auth token.[/yellow]")
        raise typer.Exit(code=1)
    except (CatalogError, CorruptLedger, LedgerWriteError, ConfigurationError) as e:
        progress_reporter.cleanup()
        logger.error(f"Synchronization aborted: {e}", extra={"correlation_id": correlation_id})
        console.print(f"[red]Synchronization aborted: {e}[/red]")
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        progress_reporter.cleanup()
        console.print("[yellow]Interrupted. Completed items are saved; run again to resume.[/yellow]")
        raise typer.Exit(code=130)
    finally:
        fetcher.close()
        if catalog is not None:
            catalog.close()

    progress_reporter.cleanup()
    progress_reporter.display_summary(result)
    console.print(f"correlation_id={result.correlation_id}")


@app.command()
def whoami(config_path: str = CONFIG_OPTION) -> None:
    """Check the configured credential and print the account name."""
    configure_logging(logging.WARNING)
    settings = load_settings(config_path)

    try:
        catalog, _ = build_catalog(settings)
        try:
            username = catalog.check_login()
        finally:
            catalog.close()
    except (CatalogError, ConfigurationError) as e:
        console.print(f"[red]Sorry, authentication failed: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"You're logged in as [bold]{username}[/bold]")
