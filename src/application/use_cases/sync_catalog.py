"""Use case for synchronizing a remote photo catalog into a local directory."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path

from ...domain.errors import DownloadFailed, MalformedItem, UnwritableFile
from ...domain.models.canonical_record import CanonicalRecord
from ...domain.services.destination_paths import DestinationAllocator
from ...domain.services.field_mapper import FIELD_MAPPING_TABLE, map_record
from ..dto.sync import ItemFailure, SyncResult
from ..ports.asset_fetcher import AssetFetcherPort
from ..ports.catalog import CatalogItem, CatalogPort
from ..ports.ledger_store import LedgerStorePort
from ..ports.notifier import NotifierPort
from ..ports.progress_reporter import ProgressReporterPort
from ..ports.tagger import TaggerPort
from ..services.metadata_normalizer import normalize_item
from ..services.progress_ledger import ProgressLedger
from ..services.tag_applier import apply_tags

logger = logging.getLogger(__name__)


def sync_catalog(
    catalog: CatalogPort,
    fetcher: AssetFetcherPort,
    tagger: TaggerPort,
    ledger_store: LedgerStorePort,
    ledger_path: Path,
    output_dir: Path,
    progress_reporter: ProgressReporterPort | None = None,
    notifier: NotifierPort | None = None,
    public_only: bool = True,
    skip_existing_files: bool = True,
    field_table: Mapping[str, str] = FIELD_MAPPING_TABLE,
    correlation_id: str | None = None,
) -> SyncResult:
    """
    Download every remote item not yet completed and tag it with its metadata.

    Workflow:
    1. Listing: geotagged items, then items without geodata, restricted to public
       items when ``public_only`` is set
    2. Filtering: every listed item is normalized before any download begins
    3. Per item, in listing order: skip when the ledger has the id or the
       destination file exists; otherwise fetch, tag, and record in the ledger.
       Items already in the ledger claim their filenames first, so a new item
       sharing a title gets an id-suffixed name instead of being skipped
    4. Done: final ledger flush and optional notification

    A failed download or tag write aborts only that item. It is never recorded
    in the ledger, so the next run retries it.

    Args:
        catalog: Catalog client
        fetcher: Payload downloader
        tagger: Tag writer for downloaded files
        ledger_store: Ledger persistence adapter
        ledger_path: Ledger file for the current credential
        output_dir: Directory receiving downloaded files
        progress_reporter: Optional progress reporter
        notifier: Optional notifier called once with a summary at the end
        public_only: Only synchronize items the catalog reports as public
        skip_existing_files: Treat an existing destination file as completed
        field_table: Field name -> tag name mapping
        correlation_id: Optional correlation ID (generated if not provided)

    Returns:
        SyncResult with counts, per-item failures and ledger details

    Raises:
        CatalogError: If listing or metadata calls fail
        CorruptLedger: If the stored ledger cannot be parsed
        LedgerWriteError: If the ledger cannot be persisted
        ConfigurationError: If the tag writer is unavailable
    """
    start_time = datetime.now()

    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    logger.info(
        "Starting catalog synchronization",
        extra={"correlation_id": correlation_id, "output_dir": str(output_dir), "public_only": public_only},
    )

    # Corrupt resumption state aborts before any remote call
    ledger = ProgressLedger.load(ledger_store, ledger_path)

    result = SyncResult(correlation_id=correlation_id, ledger_path=str(ledger.path))

    # Fails fast when the tag writer is missing, before any remote call
    writable_tags = tagger.list_writable_tag_names()

    listing = _list_items(catalog, public_only, correlation_id)
    result.listed = len(listing)

    records: list[CanonicalRecord] = []
    for item, include_geo in listing:
        try:
            records.append(normalize_item(catalog, item, include_geo=include_geo))
        except MalformedItem as e:
            logger.warning(str(e), extra={"correlation_id": correlation_id, "item_id": item.id})
            result.failures.append(ItemFailure(item_id=item.id or None, stage="normalizing", error=str(e)))
    result.normalized = len(records)

    allocator = DestinationAllocator(output_dir)
    # Completed items claim their names first so they keep them across runs
    for record in records:
        if record.id in ledger:
            allocator.allocate(record)

    batch_progress = progress_reporter.start_batch(len(records), "Synchronizing items") if progress_reporter else None

    try:
        for index, record in enumerate(records, start=1):
            destination = allocator.allocate(record)

            if record.id in ledger:
                logger.debug("Already in ledger, skipping", extra={"item_id": record.id})
                result.skipped += 1
            else:
                try:
                    already_present = skip_existing_files and destination.exists()
                except OSError as e:
                    logger.error(
                        f"Item {index}/{len(records)} destination is unusable: {e}",
                        extra={"correlation_id": correlation_id, "item_id": record.id},
                    )
                    result.failures.append(ItemFailure(item_id=record.id, stage="preparing", error=str(e)))
                else:
                    if already_present:
                        logger.debug(
                            "Destination exists, skipping",
                            extra={"item_id": record.id, "destination": str(destination)},
                        )
                        result.skipped += 1
                    elif _process_record(
                        record,
                        destination,
                        index,
                        len(records),
                        fetcher,
                        tagger,
                        writable_tags,
                        field_table,
                        ledger,
                        progress_reporter,
                        result,
                        correlation_id,
                    ):
                        result.downloaded += 1
                        result.completed_ids.append(record.id)

            if batch_progress:
                batch_progress.update(index)
    finally:
        if batch_progress:
            batch_progress.finish()
        ledger.flush()

    result.ledger_size = len(ledger)
    result.duration_seconds = (datetime.now() - start_time).total_seconds()

    logger.info(
        f"Synchronization finished: {result.summary()}",
        extra={
            "correlation_id": correlation_id,
            "downloaded": result.downloaded,
            "skipped": result.skipped,
            "failed": result.failed,
            "duration_seconds": result.duration_seconds,
        },
    )

    if notifier is not None:
        try:
            notifier.notify("Catalog synchronization complete", result.summary())
        except Exception as e:
            # Notification is best-effort and never changes the outcome
            logger.warning(f"Notification failed: {e}", extra={"correlation_id": correlation_id})

    return result


def _list_items(
    catalog: CatalogPort,
    public_only: bool,
    correlation_id: str,
) -> list[tuple[CatalogItem, bool]]:
    """Return (item, include_geo) pairs: geotagged items first, each id once."""
    partitions = (
        (catalog.list_items_with_geo(), True),
        (catalog.list_items_without_geo(), False),
    )

    listing: list[tuple[CatalogItem, bool]] = []
    seen: set[str] = set()
    private = 0
    for items, include_geo in partitions:
        for item in items:
            if item.id and item.id in seen:
                continue
            if public_only and item.id and not catalog.get_permissions(item.id).get("is_public", False):
                private += 1
                continue
            if item.id:
                seen.add(item.id)
            listing.append((item, include_geo))

    logger.info(
        f"Listed {len(listing)} items ({private} non-public skipped)",
        extra={"correlation_id": correlation_id, "listed": len(listing), "private": private},
    )
    return listing


def _process_record(
    record: CanonicalRecord,
    destination: Path,
    index: int,
    total: int,
    fetcher: AssetFetcherPort,
    tagger: TaggerPort,
    writable_tags: set[str],
    field_table: Mapping[str, str],
    ledger: ProgressLedger,
    progress_reporter: ProgressReporterPort | None,
    result: SyncResult,
    correlation_id: str,
) -> bool:
    """Fetch, tag and record one item. Returns False when the item failed."""
    item_progress = progress_reporter.start_item(index, total, destination.name) if progress_reporter else None
    log_extra = {"correlation_id": correlation_id, "item_id": record.id, "destination": str(destination)}

    if item_progress:
        item_progress.update_stage("downloading", "Downloading")
    try:
        size = fetcher.fetch(
            record.source_url,
            destination,
            progress_callback=item_progress.update_bytes if item_progress else None,
        )
    except DownloadFailed as e:
        logger.error(f"Item {index}/{total} download failed: {e}", extra=log_extra)
        result.failures.append(ItemFailure(item_id=record.id, stage="downloading", error=str(e)))
        if item_progress:
            item_progress.fail(str(e))
        return False

    if item_progress:
        item_progress.update_stage("tagging", "Writing tags")
    try:
        apply_tags(tagger, destination, map_record(record, field_table, writable_tags))
    except UnwritableFile as e:
        logger.error(f"Item {index}/{total} tagging failed: {e}", extra=log_extra)
        result.failures.append(ItemFailure(item_id=record.id, stage="tagging", error=str(e)))
        # An untagged file must not satisfy the existing-file check next run
        try:
            destination.unlink(missing_ok=True)
        except OSError as unlink_error:
            logger.warning(f"Could not remove untagged file: {unlink_error}", extra=log_extra)
        if item_progress:
            item_progress.fail(str(e))
        return False

    if item_progress:
        item_progress.update_stage("recording", "Recording completion")
    ledger.record(record.id)

    if item_progress:
        item_progress.finish()
    logger.info(f"Item {index}/{total} synchronized ({size} bytes)", extra=log_extra)
    return True
