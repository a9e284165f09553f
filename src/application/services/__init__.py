"""Application services for orchestrating domain logic."""

from .metadata_normalizer import normalize_item
from .progress_ledger import ProgressLedger
from .tag_applier import apply_tags

__all__ = ["ProgressLedger", "apply_tags", "normalize_item"]
