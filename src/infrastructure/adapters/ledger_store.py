"""Ledger store adapter: gzip-compressed JSON files written atomically."""

from __future__ import annotations

import gzip
import hashlib
import json
import logging
import os
import tempfile
import zlib
from pathlib import Path

from ...application.ports.ledger_store import LedgerStorePort
from ...domain.errors import CorruptLedger, LedgerWriteError

logger = logging.getLogger(__name__)

LEDGER_FORMAT_VERSION = 1


def credential_fingerprint(credential: str) -> str:
    """Stable short hash of a credential, used to keep one ledger per identity."""
    if not credential:
        raise ValueError("credential must be non-empty")
    return hashlib.sha256(credential.encode("utf-8")).hexdigest()[:16]


def ledger_path_for(credential: str, ledger_dir: Path) -> Path:
    """
    Derive the ledger file path for a credential.

    Returns:
        Path like ``<ledger_dir>/ledger-<fingerprint>.json.gz``
    """
    return Path(ledger_dir) / f"ledger-{credential_fingerprint(credential)}.json.gz"


class GzipLedgerStore(LedgerStorePort):
    """Reads and writes ledger files as gzip-compressed JSON."""

    def read(self, path: Path) -> set[str] | None:
        """
        Read completed item identifiers.

        Returns:
            Set of identifiers, or None if the file does not exist

        Raises:
            CorruptLedger: If the file cannot be decompressed or parsed
        """
        path = Path(path)
        if not path.exists():
            logger.debug(f"Ledger file not found: {path}")
            return None

        try:
            with gzip.open(path, "rt", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, EOFError, zlib.error, UnicodeDecodeError) as e:
            raise CorruptLedger(str(path), f"cannot decompress: {e}") from e
        except json.JSONDecodeError as e:
            raise CorruptLedger(str(path), f"invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("items"), list):
            raise CorruptLedger(str(path), "expected an object with an 'items' list")
        if payload.get("version") != LEDGER_FORMAT_VERSION:
            raise CorruptLedger(str(path), f"unsupported version {payload.get('version')!r}")

        items = payload["items"]
        if not all(isinstance(item, str) and item for item in items):
            raise CorruptLedger(str(path), "items must be non-empty strings")

        logger.debug(f"Ledger loaded: {path}", extra={"path": str(path), "items": len(items)})
        return set(items)

    def write(self, path: Path, identifiers: set[str]) -> None:
        """
        Replace the ledger file atomically (write to temp file, fsync, then rename).

        Raises:
            LedgerWriteError: If the write fails
        """
        path = Path(path)
        temp_path: Path | None = None
        payload = {"version": LEDGER_FORMAT_VERSION, "items": sorted(identifiers)}

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.tmp.",
                delete=False,
            ) as temp_file:
                temp_path = Path(temp_file.name)
                with gzip.GzipFile(fileobj=temp_file, mode="wb") as gz:
                    gz.write(json.dumps(payload, ensure_ascii=False).encode("utf-8"))
                temp_file.flush()
                os.fsync(temp_file.fileno())

            os.replace(temp_path, path)
        except OSError as e:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            logger.error(f"Failed to save ledger to {path}: {e}", exc_info=True)
            raise LedgerWriteError(str(path), str(e)) from e

        logger.debug(f"Ledger saved: {path}", extra={"path": str(path), "items": len(identifiers)})
