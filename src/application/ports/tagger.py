"""Port interface for writing embedded tags to downloaded files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Protocol


class TagContainer(Protocol):
    """Writable embedded-metadata container of one file."""

    def set(self, name: str, value: Any) -> None:
        """Stage a tag value. Sequence values write one entry per element."""
        ...

    def save(self) -> bool:
        """Commit staged values to the file. Returns False on failure."""
        ...


class TaggerPort(ABC):
    """Port for the destination file format's tag writer."""

    @abstractmethod
    def list_writable_tag_names(self) -> set[str]:
        """
        List tag names the writer accepts.

        Returns:
            Set of tag names
        """
        pass

    @abstractmethod
    def open(self, path: Path) -> TagContainer:
        """
        Open the tag container of a file.

        Args:
            path: File to tag

        Returns:
            TagContainer for staging and committing values

        Raises:
            UnwritableFile: If the file cannot be opened for tagging
        """
        pass
