"""Rich-based progress reporter adapter for synchronization runs."""

from __future__ import annotations

import logging
import sys
import time

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from ...application.dto.sync import SyncResult
from ...application.ports.progress_reporter import (
    ItemProgressContext,
    ProgressContext,
    ProgressReporterPort,
)

logger = logging.getLogger(__name__)


class RichProgressContext:
    """Batch-level progress using Rich."""

    def __init__(self, progress: Progress, task_id: TaskID, total_items: int) -> None:
        self.progress = progress
        self.task_id = task_id
        self.total_items = total_items
        self.completed = 0

    def update(self, completed: int) -> None:
        self.completed = completed
        self.progress.update(self.task_id, completed=completed)

    def finish(self) -> None:
        self.progress.stop_task(self.task_id)


class RichItemProgressContext:
    """
    Per-item progress using Rich: a byte-level download bar whose description
    follows the current stage.

    The task is removed when the item finishes so only the active item is shown.
    """

    def __init__(self, progress: Progress, task_id: TaskID, item_name: str) -> None:
        self.progress = progress
        self.task_id = task_id
        self.item_name = item_name

    def update_stage(self, stage: str, description: str) -> None:
        self.progress.update(self.task_id, description=f"[cyan]{self.item_name}[/cyan] - {description}")

    def update_bytes(self, bytes_so_far: int, total_bytes: int | None) -> None:
        self.progress.update(self.task_id, completed=bytes_so_far, total=total_bytes)

    def finish(self) -> None:
        self.progress.remove_task(self.task_id)

    def fail(self, error: str) -> None:
        self.progress.remove_task(self.task_id)
        self.progress.console.print(f"[red]{self.item_name}[/red] - Failed: {error[:80]}")


class LoggingProgressContext:
    """Fallback batch progress for non-interactive mode using logging."""

    def __init__(self, total_items: int, description: str) -> None:
        self.total_items = total_items
        self.description = description
        self.completed = 0
        self.start_time = time.time()
        logger.info(f"Starting: {description} ({total_items} items)")

    def update(self, completed: int) -> None:
        self.completed = completed
        elapsed = time.time() - self.start_time
        percentage = (completed / self.total_items * 100) if self.total_items > 0 else 0
        logger.info(
            f"Progress: {completed}/{self.total_items} items ({percentage:.1f}%) - Elapsed: {elapsed:.1f}s"
        )

    def finish(self) -> None:
        elapsed = time.time() - self.start_time
        logger.info(f"Completed: {self.description} - {self.completed}/{self.total_items} items in {elapsed:.1f}s")


class LoggingItemProgressContext:
    """Fallback item progress for non-interactive mode using logging."""

    # Log download progress at most every this many seconds
    LOG_INTERVAL = 10.0

    def __init__(self, item_index: int, total_items: int, item_name: str) -> None:
        self.item_index = item_index
        self.total_items = total_items
        self.item_name = item_name
        self.start_time = time.time()
        self._last_log_time = 0.0
        logger.info(f"Item {item_index}/{total_items}: {item_name}")

    def update_stage(self, stage: str, description: str) -> None:
        logger.debug(f"Item {self.item_index}/{self.total_items} ({self.item_name}): {description}")

    def update_bytes(self, bytes_so_far: int, total_bytes: int | None) -> None:
        now = time.time()
        if now - self._last_log_time < self.LOG_INTERVAL and bytes_so_far != total_bytes:
            return
        self._last_log_time = now
        received_mb = bytes_so_far / (1024 * 1024)
        if total_bytes:
            logger.info(
                f"Item {self.item_index}/{self.total_items}: {received_mb:.1f} / "
                f"{total_bytes / (1024 * 1024):.1f} MB"
            )
        else:
            logger.info(f"Item {self.item_index}/{self.total_items}: {received_mb:.1f} MB downloaded")

    def finish(self) -> None:
        logger.info(
            f"Item {self.item_index}/{self.total_items} ({self.item_name}): "
            f"completed in {time.time() - self.start_time:.2f}s"
        )

    def fail(self, error: str) -> None:
        logger.error(f"Item {self.item_index}/{self.total_items} ({self.item_name}): failed - {error}")


class RichProgressReporterAdapter(ProgressReporterPort):
    """Rich-based progress reporter; falls back to logging when stdout is not a TTY."""

    def __init__(self, console: Console | None = None) -> None:
        self.is_interactive = sys.stdout.isatty()
        self.console = console or Console(file=sys.stdout if self.is_interactive else sys.stderr)
        self.progress: Progress | None = None

        if not self.is_interactive:
            logger.info("Non-interactive mode detected - using structured logging for progress")

    def _ensure_progress(self) -> Progress:
        if self.progress is None:
            self.progress = Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                DownloadColumn(),
                TransferSpeedColumn(),
                TimeElapsedColumn(),
                TimeRemainingColumn(),
                console=self.console,
                expand=True,
            )
            self.progress.start()
        return self.progress

    def start_batch(
        self,
        total_items: int,
        description: str = "Synchronizing items",
    ) -> ProgressContext:
        if not self.is_interactive:
            return LoggingProgressContext(total_items=total_items, description=description)

        progress = self._ensure_progress()
        task_id = progress.add_task(description, total=total_items)
        return RichProgressContext(progress=progress, task_id=task_id, total_items=total_items)

    def start_item(
        self,
        item_index: int,
        total_items: int,
        item_name: str,
    ) -> ItemProgressContext:
        if not self.is_interactive or self.progress is None:
            return LoggingItemProgressContext(item_index=item_index, total_items=total_items, item_name=item_name)

        task_id = self.progress.add_task(f"{item_index}/{total_items} {item_name}", total=None)
        return RichItemProgressContext(progress=self.progress, task_id=task_id, item_name=item_name)

    def display_summary(self, result: SyncResult) -> None:
        """Display final summary after a run."""
        summary_table = Table(title="Synchronization Summary", show_header=True, header_style="bold")
        summary_table.add_column("Metric", style="cyan")
        summary_table.add_column("Value", style="green")

        summary_table.add_row("Items Listed", str(result.listed))
        summary_table.add_row("Downloaded", str(result.downloaded))
        summary_table.add_row("Already Done", str(result.skipped))
        summary_table.add_row("Failed", str(result.failed))
        summary_table.add_row("Ledger Entries", str(result.ledger_size))
        summary_table.add_row("Duration", f"{result.duration_seconds:.2f}s")

        self.console.print(summary_table)

        if result.failures:
            lines = [f"{f.item_id or '<no id>'} ({f.stage}): {f.error}" for f in result.failures[:10]]
            if len(result.failures) > 10:
                lines.append(f"... and {len(result.failures) - 10} more errors")
            self.console.print(
                Panel(
                    "\n".join(lines) + "\n\nFailed items stay pending and are retried on the next run.",
                    title="Errors",
                    border_style="red",
                )
            )

    def cleanup(self) -> None:
        """Stop the live progress display (call when done)."""
        if self.progress is not None:
            self.progress.stop()
            self.progress = None
