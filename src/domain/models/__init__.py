"""Domain models for catalog synchronization."""

from .canonical_record import GEO_FIELDS, RECORD_FIELDS, CanonicalRecord

__all__ = [
    "CanonicalRecord",
    "GEO_FIELDS",
    "RECORD_FIELDS",
]
