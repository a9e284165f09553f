"""Canonical record: normalized metadata for one remote catalog item."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from src.domain.errors import MalformedItem

GEO_FIELDS = ("latitude", "longitude", "location", "country")

# Declaration order of the optional fields, used by fields()
RECORD_FIELDS = (
    "title",
    "description",
    "tags",
    "latitude",
    "longitude",
    "location",
    "country",
    "source_url",
)


@dataclass(frozen=True)
class CanonicalRecord:
    """
    Normalized metadata for one remote item, independent of the wire format.

    Fields:
        id: Stable remote identifier (required, never empty)
        source_url: Resolved payload location (required, never empty)
        title: Display name, used to derive the local filename
        description: Free text
        tags: Free-text labels in listing order, de-duplicated
        latitude: Decimal degrees (None when the item has no location)
        longitude: Decimal degrees (None when the item has no location)
        location: "locality, region, country" of the parts that are present
        country: Country name

    Unset optional values are None (or an empty tuple for tags), never "".
    """

    id: str
    source_url: str
    title: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()
    latitude: float | None = None
    longitude: float | None = None
    location: str | None = None
    country: str | None = None

    def __post_init__(self) -> None:
        """Validate required fields and normalize empty text to None."""
        if not self.id:
            raise MalformedItem(self.id, "id must be non-empty")
        if not self.source_url:
            raise MalformedItem(self.id, "source_url must be non-empty")
        for name in ("title", "description", "location", "country"):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)
        object.__setattr__(self, "tags", tuple(dict.fromkeys(t for t in self.tags if t)))

    @property
    def has_geo(self) -> bool:
        return any(getattr(self, name) is not None for name in GEO_FIELDS)

    def fields(self) -> list[tuple[str, Any]]:
        """Return (field_name, value) pairs for every set optional field, in declaration order."""
        pairs: list[tuple[str, Any]] = []
        for name in RECORD_FIELDS:
            value = getattr(self, name)
            if value is None or value == ():
                continue
            pairs.append((name, value))
        return pairs
