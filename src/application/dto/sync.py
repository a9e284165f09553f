from pydantic import BaseModel


class ItemFailure(BaseModel):
    """A per-item failure; the item stays pending for the next run."""

    item_id: str | None
    stage: str  # normalizing | preparing | downloading | tagging
    error: str


class SyncResult(BaseModel):
    """Result DTO for the catalog synchronization use case."""

    correlation_id: str
    listed: int = 0
    normalized: int = 0
    downloaded: int = 0
    skipped: int = 0
    failures: list[ItemFailure] = []
    completed_ids: list[str] = []
    ledger_path: str
    ledger_size: int = 0
    duration_seconds: float = 0.0

    @property
    def failed(self) -> int:
        return len(self.failures)

    def summary(self) -> str:
        """Human-readable one-line summary for notifications."""
        text = f"Downloaded {self.downloaded} of {self.listed} items, {self.skipped} already done"
        if self.failures:
            text += f", {self.failed} failed"
        return text + "."
