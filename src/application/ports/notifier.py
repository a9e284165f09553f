"""Port interface for end-of-run notifications."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NotifierPort(Protocol):
    """Protocol for a fire-and-forget user notification."""

    def notify(self, title: str, message: str) -> None:
        """
        Show a notification.

        Args:
            title: Short heading
            message: Human-readable summary
        """
        ...
