"""Destination filename derivation for downloaded payloads."""

from __future__ import annotations

import re
from pathlib import Path, PurePosixPath
from urllib.parse import urlsplit

from src.domain.models.canonical_record import CanonicalRecord

DEFAULT_EXTENSION = ".jpg"

# Filesystems cap names at 255 bytes; the rest is left for "_<id>", the
# extension and the ".<name>.part.<random>" download temp name
MAX_STEM_BYTES = 150


def _truncate_utf8(text: str, max_bytes: int) -> str:
    encoded = text.encode("utf-8")
    if len(encoded) <= max_bytes:
        return text
    return encoded[:max_bytes].decode("utf-8", errors="ignore")


def sanitize_title(title: str) -> str:
    """
    Sanitize a title for use as a filename stem.

    Args:
        title: Raw display title

    Returns:
        Stem of at most MAX_STEM_BYTES UTF-8 bytes, safe for common filesystems (may be empty)
    """
    # Path separators, reserved characters and control characters
    sanitized = re.sub(r'[<>:"/\\|?*\x00-\x1f]', "_", title)

    # Windows rejects leading/trailing dots and spaces
    sanitized = sanitized.strip(" .")

    return _truncate_utf8(sanitized, MAX_STEM_BYTES).rstrip(" .")


def extension_for(source_url: str) -> str:
    """Return the lower-cased file extension of the URL path, or DEFAULT_EXTENSION."""
    suffix = PurePosixPath(urlsplit(source_url).path).suffix.lower()
    if not suffix or not re.fullmatch(r"\.[a-z0-9]{1,5}", suffix):
        return DEFAULT_EXTENSION
    return suffix


class DestinationAllocator:
    """
    Assigns one destination path per record for a single run.

    Names are claimed in the order records are offered. When a later record
    sanitizes to a name already claimed, it gets ``<stem>_<id><ext>`` instead of
    overwriting the earlier file. Items without a usable title are named by id.

    Offering already-completed records first lets them keep the names their
    files were saved under, so a new item with the same title is suffixed
    rather than mistaken for the existing file.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self._claimed: dict[str, str] = {}
        self._assigned: dict[str, Path] = {}

    def allocate(self, record: CanonicalRecord) -> Path:
        assigned = self._assigned.get(record.id)
        if assigned is not None:
            return assigned

        stem = sanitize_title(record.title or "") or sanitize_title(record.id)
        ext = extension_for(record.source_url)

        name = f"{stem}{ext}"
        if name.lower() in self._claimed:
            name = f"{stem}_{sanitize_title(record.id)}{ext}"

        self._claimed[name.lower()] = record.id
        self._assigned[record.id] = self.output_dir / name
        return self._assigned[record.id]
