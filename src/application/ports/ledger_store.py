"""Port interface for persisting the progress ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class LedgerStorePort(ABC):
    """Port for reading and writing progress ledger files."""

    @abstractmethod
    def read(self, path: Path) -> set[str] | None:
        """
        Read completed item identifiers from a ledger file.

        Args:
            path: Ledger file path

        Returns:
            Set of identifiers, or None if no file exists at ``path``

        Raises:
            CorruptLedger: If the file exists but cannot be parsed
        """
        pass

    @abstractmethod
    def write(self, path: Path, identifiers: set[str]) -> None:
        """
        Replace the ledger file atomically (write to temp file, then rename).

        A crash mid-write leaves either the previous complete file or the new one.

        Args:
            path: Ledger file path
            identifiers: Complete set of identifiers to persist

        Raises:
            LedgerWriteError: If the write fails
        """
        pass
