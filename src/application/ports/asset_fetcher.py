"""Port interface for streaming binary payloads to local storage."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

# (bytes_so_far, total_bytes_if_known)
ProgressCallback = Callable[[int, "int | None"], None]


@runtime_checkable
class AssetFetcherPort(Protocol):
    """Protocol for downloading a payload from a URL."""

    def fetch(
        self,
        url: str,
        destination: Path,
        progress_callback: ProgressCallback | None = None,
    ) -> int:
        """
        Stream ``url`` into ``destination``, overwriting any existing file.

        Args:
            url: Payload URL
            destination: Local file path
            progress_callback: Called with (bytes_so_far, total_or_None) as data arrives

        Returns:
            Number of bytes written

        Raises:
            DownloadFailed: On transport error, bad status or local write error.
                No retries are attempted.
        """
        ...
