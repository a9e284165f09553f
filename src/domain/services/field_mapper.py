"""Mapping of canonical record fields onto destination tag names."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from src.domain.models.canonical_record import CanonicalRecord

# Ordered: output pairs follow this order
FIELD_MAPPING_TABLE: Mapping[str, str] = {
    "title": "Title",
    "description": "Caption-Abstract",
    "tags": "Subject",
    "latitude": "GPSLatitude",
    "longitude": "GPSLongitude",
    "location": "Location",
    "country": "Country",
    "source_url": "UserComment",
}


def map_record(
    record: CanonicalRecord,
    table: Mapping[str, str] = FIELD_MAPPING_TABLE,
    writable_tags: Iterable[str] | None = None,
) -> list[tuple[str, Any]]:
    """
    Map a canonical record onto (tag_name, value) pairs.

    A pair is emitted for each field that is set on the record, has an entry in
    ``table`` and whose tag name is accepted by the tag writer. Fields that fail
    any of these checks are omitted. Pure function: the output depends only on
    the arguments.

    Args:
        record: Canonical record to map
        table: Field name -> tag name mapping, iterated in order
        writable_tags: Tag names the destination accepts (case-insensitive).
            None accepts every mapped tag.

    Returns:
        Ordered list of (tag_name, value) pairs
    """
    accepted = None if writable_tags is None else {name.lower() for name in writable_tags}
    values = dict(record.fields())

    pairs: list[tuple[str, Any]] = []
    for field_name, tag_name in table.items():
        if field_name not in values or not tag_name:
            continue
        if accepted is not None and tag_name.lower() not in accepted:
            continue
        pairs.append((tag_name, values[field_name]))
    return pairs
