"""Turns raw catalog responses into canonical records."""

from __future__ import annotations

import html
import logging
import math
from typing import Any
from urllib.parse import unquote

from ...domain.errors import MalformedItem
from ...domain.models.canonical_record import CanonicalRecord
from ..ports.catalog import CatalogItem, CatalogPort

logger = logging.getLogger(__name__)


def decode_text(value: Any) -> str | None:
    """
    Decode a wire value: percent escapes first, then HTML character references.

    ``+`` is kept literally so labels such as "C++" survive.

    Returns:
        Decoded, stripped text, or None when the value is absent or blank
    """
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        value = " ".join(str(part) for part in value)
    text = html.unescape(unquote(str(value))).strip()
    return text or None


def _parse_coordinate(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        coordinate = float(value)
    except (TypeError, ValueError):
        return None
    return coordinate if math.isfinite(coordinate) else None


def join_location(locality: str | None, region: str | None, country: str | None) -> str | None:
    """Join the present parts with ", " in locality, region, country order; None if none are present."""
    parts = [part for part in (locality, region, country) if part]
    return ", ".join(parts) if parts else None


def _resolve_source_url(item_id: str, sizes: list[dict[str, Any]]) -> str:
    # Variants arrive smallest first; take the largest usable one
    for size in reversed(sizes or []):
        source = (size or {}).get("source")
        if source and str(source).strip():
            return str(source).strip().replace(" ", "")
    raise MalformedItem(item_id, "no downloadable size variant")


def normalize_item(catalog: CatalogPort, item: CatalogItem, include_geo: bool) -> CanonicalRecord:
    """
    Build a canonical record for one listed item.

    Attributes the service does not return become unset fields. Geo sub-fields
    are fetched only when ``include_geo`` is true, because the service errors for
    items known to have no location.

    Args:
        catalog: Catalog client
        item: Listed item handle
        include_geo: Whether to query the item's location

    Returns:
        CanonicalRecord for the item

    Raises:
        MalformedItem: If the item has no id or no resolvable source URL
        CatalogError: If a catalog call fails (fatal for the run)
    """
    item_id = (item.id or "").strip()
    if not item_id:
        raise MalformedItem(None, "listing entry has no id")

    source_url = _resolve_source_url(item_id, catalog.get_sizes(item_id))

    info = catalog.get_info(item_id) or {}
    raw_tags = info.get("tags") or []
    if isinstance(raw_tags, str):
        raw_tags = raw_tags.split()
    tags = tuple(tag for tag in (decode_text(raw) for raw in raw_tags) if tag)

    fields: dict[str, Any] = {
        "title": decode_text(info.get("title")),
        "description": decode_text(info.get("description")),
        "tags": tags,
    }

    if include_geo:
        geo = catalog.get_location(item_id) or {}
        country = decode_text(geo.get("country"))
        fields.update(
            latitude=_parse_coordinate(geo.get("latitude")),
            longitude=_parse_coordinate(geo.get("longitude")),
            location=join_location(decode_text(geo.get("locality")), decode_text(geo.get("region")), country),
            country=country,
        )

    record = CanonicalRecord(id=item_id, source_url=source_url, **fields)
    logger.debug(
        "Normalized item",
        extra={"item_id": item_id, "include_geo": include_geo, "has_geo": record.has_geo},
    )
    return record
