"""Port interface for the remote photo catalog."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


@dataclass(frozen=True)
class CatalogItem:
    """
    Handle for one listed remote item.

    Attributes:
        id: Remote item identifier (may be empty for malformed listings)
        title: Title as returned by the listing call (informational only)
        raw: Raw listing payload
    """

    id: str
    title: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


class CatalogPort(ABC):
    """
    Port for the remote catalog service.

    Every method raises CatalogError on transport or service failure and
    CatalogAuthError when the credential is rejected. Both are fatal for a run.
    """

    @abstractmethod
    def check_login(self) -> str:
        """
        Verify the credential against the service.

        Returns:
            Username of the authenticated identity
        """
        pass

    @abstractmethod
    def list_items_with_geo(self) -> list[CatalogItem]:
        """List the authenticated identity's items that carry geodata."""
        pass

    @abstractmethod
    def list_items_without_geo(self) -> list[CatalogItem]:
        """List the authenticated identity's items without geodata."""
        pass

    @abstractmethod
    def get_permissions(self, item_id: str) -> dict[str, Any]:
        """
        Get visibility of an item.

        Returns:
            Dict with key 'is_public' (bool)
        """
        pass

    @abstractmethod
    def get_sizes(self, item_id: str) -> list[dict[str, Any]]:
        """
        Get payload variants of an item.

        Returns:
            Variants ordered smallest to largest, each with keys
            'label', 'source', 'width', 'height'
        """
        pass

    @abstractmethod
    def get_info(self, item_id: str) -> dict[str, Any]:
        """
        Get descriptive metadata of an item.

        Returns:
            Dict with keys 'title', 'description' (percent-escaped text or None)
            and 'tags' (list of percent-escaped labels)
        """
        pass

    @abstractmethod
    def get_location(self, item_id: str) -> dict[str, Any]:
        """
        Get geodata of an item. Only valid for items listed with geodata.

        Returns:
            Dict with keys 'latitude', 'longitude', 'locality', 'region', 'country';
            any of them may be missing
        """
        pass
