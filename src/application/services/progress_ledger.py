"""Durable set of item identifiers whose download and tag cycle completed."""

from __future__ import annotations

import logging
from pathlib import Path

from ..ports.ledger_store import LedgerStorePort

logger = logging.getLogger(__name__)


class ProgressLedger:
    """
    Progress ledger owned by a single synchronization run.

    Loaded once at start, extended with ``record`` after each fully successful
    item. Every ``record`` persists the whole set, so an interrupted run loses at
    most the item that was in flight.
    """

    def __init__(self, store: LedgerStorePort, path: Path, identifiers: set[str] | None = None) -> None:
        self.store = store
        self.path = Path(path)
        self._identifiers: set[str] = set(identifiers or ())

    @classmethod
    def load(cls, store: LedgerStorePort, path: Path) -> ProgressLedger:
        """
        Load the ledger stored at ``path``.

        Returns an empty ledger when no file exists.

        Raises:
            CorruptLedger: If the stored file cannot be parsed
        """
        identifiers = store.read(Path(path))
        if identifiers is None:
            logger.info("No progress ledger found, starting empty", extra={"path": str(path)})
            identifiers = set()
        else:
            logger.info(
                f"Loaded progress ledger with {len(identifiers)} completed items",
                extra={"path": str(path), "completed": len(identifiers)},
            )
        return cls(store, path, identifiers)

    def contains(self, item_id: str) -> bool:
        return item_id in self._identifiers

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)

    def identifiers(self) -> frozenset[str]:
        return frozenset(self._identifiers)

    def record(self, item_id: str) -> None:
        """
        Mark ``item_id`` complete and persist the full set immediately.

        Raises:
            LedgerWriteError: If persisting fails
        """
        if not item_id:
            raise ValueError("item_id must be non-empty")
        self._identifiers.add(item_id)
        self.store.write(self.path, self._identifiers)

    def flush(self) -> None:
        """Persist the current set. Idempotent."""
        self.store.write(self.path, self._identifiers)
