"""Port interface for reporting progress during a synchronization run."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class ProgressContext(Protocol):
    """Context for batch progress."""

    def update(self, completed: int) -> None:
        """Update batch progress with number of items handled so far."""
        ...

    def finish(self) -> None:
        """Mark batch as complete."""
        ...


class ItemProgressContext(Protocol):
    """Context for progress of a single item."""

    def update_stage(
        self,
        stage: str,
        description: str,
    ) -> None:
        """
        Update current processing stage.

        Args:
            stage: Stage name (downloading, tagging, recording)
            description: Human-readable description
        """
        ...

    def update_bytes(self, bytes_so_far: int, total_bytes: int | None) -> None:
        """
        Report download progress. Usable directly as a fetcher progress callback.

        Args:
            bytes_so_far: Bytes received so far
            total_bytes: Declared payload size, None when unknown
        """
        ...

    def finish(self) -> None:
        """Mark item processing as complete."""
        ...

    def fail(self, error: str) -> None:
        """
        Mark item processing as failed.

        Args:
            error: Error message
        """
        ...


class ProgressReporterPort(ABC):
    """Port for reporting progress during a synchronization run."""

    @abstractmethod
    def start_batch(
        self,
        total_items: int,
        description: str = "Synchronizing items",
    ) -> ProgressContext:
        """
        Start progress reporting for a batch.

        Args:
            total_items: Total number of items in the batch
            description: Description for progress bar

        Returns:
            ProgressContext for updating progress
        """
        pass

    @abstractmethod
    def start_item(
        self,
        item_index: int,
        total_items: int,
        item_name: str,
    ) -> ItemProgressContext:
        """
        Start progress reporting for a single item.

        Args:
            item_index: Index of current item (1-based)
            total_items: Total number of items
            item_name: Display name for the item

        Returns:
            ItemProgressContext for updating item-level progress
        """
        pass
