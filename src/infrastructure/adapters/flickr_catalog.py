"""Catalog adapter for the Flickr REST API over httpx."""

from __future__ import annotations

import hashlib
import logging
import time
from typing import Any

import httpx

from ...application.ports.catalog import CatalogItem, CatalogPort
from ...domain.errors import CatalogAuthError, CatalogError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.flickr.com/services/rest/"

# Flickr error codes meaning the credential or signature was rejected
AUTH_ERROR_CODES = {96, 97, 98, 99, 100}


def sign_params(params: dict[str, str], secret: str) -> str:
    """
    Compute the request signature: MD5 of the secret followed by every
    key and value concatenated in key order.
    """
    payload = secret + "".join(f"{key}{params[key]}" for key in sorted(params))
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def _content(node: Any) -> str | None:
    """Extract text from Flickr's {"_content": ...} wrappers."""
    if node is None:
        return None
    if isinstance(node, dict):
        node = node.get("_content")
    if node is None:
        return None
    return str(node)


class FlickrCatalogAdapter(CatalogPort):
    """
    Catalog adapter for one authenticated Flickr identity.

    Requests are signed with the application secret and carry the auth token
    handed in by configuration. Listing calls page through all results.
    """

    # Minimum spacing between API calls
    MIN_REQUEST_INTERVAL = 0.2  # seconds

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        auth_token: str,
        client: httpx.Client | None = None,
        base_url: str = DEFAULT_BASE_URL,
        per_page: int = 500,
        timeout_seconds: float = 30.0,
    ) -> None:
        """
        Args:
            api_key: Application API key
            api_secret: Application shared secret used for signing
            auth_token: Opaque auth token of the identity to synchronize
            client: Optional preconfigured httpx client (owned by the caller)
            base_url: REST endpoint
            per_page: Page size for listing calls (max 500)
            timeout_seconds: Request timeout when creating the client
        """
        if not api_key or not api_secret:
            raise CatalogAuthError("Flickr api_key and api_secret are required")
        if not auth_token:
            raise CatalogAuthError("Flickr auth token is required")

        self.api_key = api_key
        self.api_secret = api_secret
        self.auth_token = auth_token
        self.base_url = base_url
        self.per_page = per_page
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout_seconds)
        self._last_request_time = 0.0

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def _rate_limit(self) -> None:
        elapsed = time.monotonic() - self._last_request_time
        if elapsed < self.MIN_REQUEST_INTERVAL:
            time.sleep(self.MIN_REQUEST_INTERVAL - elapsed)
        self._last_request_time = time.monotonic()

    def _call(self, method: str, **params: Any) -> dict[str, Any]:
        """
        Invoke a REST method and return the decoded JSON body.

        Raises:
            CatalogAuthError: If Flickr rejects the credential or signature
            CatalogError: On transport errors, bad status or a failed response
        """
        query = {
            "method": method,
            "api_key": self.api_key,
            "auth_token": self.auth_token,
            "format": "json",
            "nojsoncallback": "1",
            **{key: str(value) for key, value in params.items()},
        }
        query["api_sig"] = sign_params(query, self.api_secret)

        self._rate_limit()
        try:
            response = self.client.get(self.base_url, params=query)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise CatalogError(
                f"Flickr returned HTTP {e.response.status_code}",
                method=method,
                details={"status": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise CatalogError(f"Flickr request failed: {e}", method=method) from e
        except ValueError as e:
            raise CatalogError(f"Flickr returned invalid JSON: {e}", method=method) from e

        if not isinstance(body, dict):
            raise CatalogError("Flickr returned an unexpected payload", method=method)

        if body.get("stat") != "ok":
            code = body.get("code")
            message = body.get("message", "unknown error")
            error_cls = CatalogAuthError if code in AUTH_ERROR_CODES else CatalogError
            raise error_cls(f"Flickr error {code}: {message}", method=method, details={"code": code})

        return body

    def check_login(self) -> str:
        body = self._call("flickr.test.login")
        user = body.get("user") or {}
        username = _content(user.get("username")) or user.get("id", "")
        logger.info("Authenticated with Flickr", extra={"username": username})
        return username

    def _list(self, method: str) -> list[CatalogItem]:
        items: list[CatalogItem] = []
        page = 1
        while True:
            body = self._call(method, page=page, per_page=self.per_page)
            photos = body.get("photos") or {}
            for photo in photos.get("photo") or []:
                items.append(
                    CatalogItem(
                        id=str(photo.get("id") or ""),
                        title=photo.get("title"),
                        raw=photo,
                    )
                )
            pages = int(photos.get("pages") or 1)
            if page >= pages:
                break
            page += 1

        logger.debug(f"{method} returned {len(items)} items", extra={"method": method, "count": len(items)})
        return items

    def list_items_with_geo(self) -> list[CatalogItem]:
        return self._list("flickr.photos.getWithGeoData")

    def list_items_without_geo(self) -> list[CatalogItem]:
        return self._list("flickr.photos.getWithoutGeoData")

    def get_permissions(self, item_id: str) -> dict[str, Any]:
        perms = self._call("flickr.photos.getPerms", photo_id=item_id).get("perms") or {}
        return {"is_public": str(perms.get("ispublic", 0)) == "1"}

    def get_sizes(self, item_id: str) -> list[dict[str, Any]]:
        sizes = (self._call("flickr.photos.getSizes", photo_id=item_id).get("sizes") or {}).get("size") or []
        variants = [
            {
                "label": size.get("label"),
                "source": size.get("source"),
                "width": _to_int(size.get("width")),
                "height": _to_int(size.get("height")),
            }
            for size in sizes
        ]
        # Keep smallest-to-largest ordering even if the service reorders variants
        variants.sort(key=lambda v: (v["width"] or 0) * (v["height"] or 0))
        return variants

    def get_info(self, item_id: str) -> dict[str, Any]:
        photo = self._call("flickr.photos.getInfo", photo_id=item_id).get("photo") or {}
        tags = (photo.get("tags") or {}).get("tag") or []
        return {
            "title": _content(photo.get("title")),
            "description": _content(photo.get("description")),
            "tags": [tag.get("raw") or tag.get("_content") for tag in tags if tag.get("raw") or tag.get("_content")],
        }

    def get_location(self, item_id: str) -> dict[str, Any]:
        photo = self._call("flickr.photos.geo.getLocation", photo_id=item_id).get("photo") or {}
        location = photo.get("location") or {}
        return {
            "latitude": location.get("latitude"),
            "longitude": location.get("longitude"),
            "locality": _content(location.get("locality")),
            "region": _content(location.get("region")),
            "country": _content(location.get("country")),
        }


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None
