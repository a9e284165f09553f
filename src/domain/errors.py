"""Domain errors for catalog synchronization."""


class MalformedItem(Exception):
    """
    Raised when a remote item cannot be turned into a canonical record.

    Per-item error: the orchestrator skips the item and continues.

    Attributes:
        item_id: Remote item identifier (may be empty when the id itself is missing)
        reason: Why the item is malformed
    """

    def __init__(self, item_id: str | None, reason: str) -> None:
        self.item_id = item_id
        self.reason = reason
        label = f"'{item_id}'" if item_id else "<missing id>"
        super().__init__(f"Malformed item {label}: {reason}")


class CorruptLedger(Exception):
    """
    Raised when a stored progress ledger cannot be parsed.

    Fatal: resumption state must not be silently discarded.

    Attributes:
        path: Ledger file path
        reason: Parse failure detail
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            f"Progress ledger is corrupt: {path} ({reason}). "
            f"Move the file aside to start over; every item will be synchronized again."
        )


class LedgerWriteError(Exception):
    """
    Raised when the progress ledger cannot be persisted.

    Attributes:
        path: Ledger file path
        reason: Underlying failure
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write progress ledger {path}: {reason}")


class DownloadFailed(Exception):
    """
    Raised when a payload download fails (transport error, bad status, local write).

    Attributes:
        url: Source URL
        cause: Human-readable cause
    """

    def __init__(self, url: str, cause: str) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Download failed for {url}: {cause}")


class UnwritableFile(Exception):
    """
    Raised when tags cannot be written to a downloaded file.

    Attributes:
        path: File path
        reason: Why the file could not be opened or saved
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write tags to {path}: {reason}")


class CatalogError(Exception):
    """
    Raised when a catalog service call fails. Fatal for the whole run.

    Attributes:
        message: Error message
        method: Remote method that failed (optional)
        details: Additional details (optional)
    """

    def __init__(self, message: str, method: str | None = None, details: dict | None = None) -> None:
        self.message = message
        self.method = method
        self.details = details or {}
        super().__init__(f"{message} (method={method})" if method else message)


class CatalogAuthError(CatalogError):
    """Raised when the catalog rejects the configured credential."""


class ConfigurationError(Exception):
    """
    Raised when required configuration is missing or invalid.

    Attributes:
        key: Configuration key or environment variable
        hint: Actionable hint for resolution
    """

    def __init__(self, key: str, hint: str | None = None) -> None:
        self.key = key
        self.hint = hint
        msg = f"Missing or invalid configuration: {key}"
        if hint:
            msg += f". {hint}"
        super().__init__(msg)
