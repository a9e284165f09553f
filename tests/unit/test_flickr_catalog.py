"""Unit tests for the Flickr catalog adapter."""

from __future__ import annotations

import hashlib
from typing import Any

import httpx
import pytest

from src.domain.errors import CatalogAuthError, CatalogError
from src.infrastructure.adapters.flickr_catalog import FlickrCatalogAdapter, sign_params


class FlickrStub:
    """Answers REST calls by method name and records the query parameters."""

    def __init__(self, responses: dict[str, Any]) -> None:
        self.responses = responses
        self.requests: list[dict[str, str]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        params = dict(request.url.params)
        self.requests.append(params)
        body = self.responses[params["method"]]
        if callable(body):
            body = body(params)
        if isinstance(body, httpx.Response):
            return body
        return httpx.Response(200, json=body)


def _catalog(stub: FlickrStub, per_page: int = 500) -> FlickrCatalogAdapter:
    catalog = FlickrCatalogAdapter(
        api_key="key",
        api_secret="secret",
        auth_token="token",
        client=httpx.Client(transport=httpx.MockTransport(stub)),
        per_page=per_page,
    )
    catalog.MIN_REQUEST_INTERVAL = 0
    return catalog


def test_sign_params_matches_md5_of_sorted_pairs():
    params = {"method": "flickr.test.login", "api_key": "key"}

    expected = hashlib.md5(b"secretapi_keykeymethodflickr.test.login").hexdigest()

    assert sign_params(params, "secret") == expected


def test_requests_are_signed_and_authenticated():
    """Test the common request parameters."""
    stub = FlickrStub({"flickr.test.login": {"stat": "ok", "user": {"id": "1@N00", "username": {"_content": "alice"}}}})

    username = _catalog(stub).check_login()

    assert username == "alice"
    params = stub.requests[0]
    assert params["api_key"] == "key"
    assert params["auth_token"] == "token"
    assert params["format"] == "json"
    assert params["nojsoncallback"] == "1"
    signature = params.pop("api_sig")
    assert signature == sign_params(params, "secret")


def test_missing_credentials_are_rejected():
    with pytest.raises(CatalogAuthError):
        FlickrCatalogAdapter(api_key="", api_secret="secret", auth_token="token")
    with pytest.raises(CatalogAuthError):
        FlickrCatalogAdapter(api_key="key", api_secret="secret", auth_token="")


def test_listing_paginates():
    """Test that all pages of a listing are collected."""

    def page(params: dict[str, str]) -> dict[str, Any]:
        number = int(params["page"])
        photos = [{"id": str(number * 10 + i), "title": f"p{number}-{i}"} for i in range(2)]
        return {"stat": "ok", "photos": {"page": number, "pages": 3, "photo": photos}}

    stub = FlickrStub({"flickr.photos.getWithGeoData": page})

    items = _catalog(stub, per_page=2).list_items_with_geo()

    assert [item.id for item in items] == ["10", "11", "20", "21", "30", "31"]
    assert items[0].title == "p1-0"
    assert [r["page"] for r in stub.requests] == ["1", "2", "3"]
    assert all(r["per_page"] == "2" for r in stub.requests)


def test_empty_listing():
    stub = FlickrStub({"flickr.photos.getWithoutGeoData": {"stat": "ok", "photos": {"pages": 0, "photo": []}}})

    assert _catalog(stub).list_items_without_geo() == []


def test_get_permissions():
    stub = FlickrStub({"flickr.photos.getPerms": {"stat": "ok", "perms": {"id": "42", "ispublic": 1}}})

    assert _catalog(stub).get_permissions("42") == {"is_public": True}
    assert stub.requests[0]["photo_id"] == "42"


def test_get_sizes_orders_smallest_to_largest():
    stub = FlickrStub(
        {
            "flickr.photos.getSizes": {
                "stat": "ok",
                "sizes": {
                    "size": [
                        {"label": "Original", "source": "https://x/o.jpg", "width": "4000", "height": "3000"},
                        {"label": "Square", "source": "https://x/s.jpg", "width": 75, "height": 75},
                    ]
                },
            }
        }
    )

    sizes = _catalog(stub).get_sizes("42")

    assert [size["label"] for size in sizes] == ["Square", "Original"]
    assert sizes[-1]["source"] == "https://x/o.jpg"


def test_get_info_extracts_content_wrappers():
    stub = FlickrStub(
        {
            "flickr.photos.getInfo": {
                "stat": "ok",
                "photo": {
                    "title": {"_content": "Sunset"},
                    "description": {"_content": "Evening &amp; sea"},
                    "tags": {"tag": [{"raw": "Sea View", "_content": "seaview"}, {"_content": "sky"}]},
                },
            }
        }
    )

    info = _catalog(stub).get_info("42")

    assert info == {"title": "Sunset", "description": "Evening &amp; sea", "tags": ["Sea View", "sky"]}


def test_get_location():
    stub = FlickrStub(
        {
            "flickr.photos.geo.getLocation": {
                "stat": "ok",
                "photo": {
                    "location": {
                        "latitude": "51.4545",
                        "longitude": "-2.5879",
                        "locality": {"_content": "Bristol"},
                        "region": {"_content": "England"},
                        "country": {"_content": "UK"},
                    }
                },
            }
        }
    )

    location = _catalog(stub).get_location("42")

    assert location == {
        "latitude": "51.4545",
        "longitude": "-2.5879",
        "locality": "Bristol",
        "region": "England",
        "country": "UK",
    }


def test_invalid_token_raises_auth_error():
    stub = FlickrStub({"flickr.test.login": {"stat": "fail", "code": 98, "message": "Invalid auth token"}})

    with pytest.raises(CatalogAuthError) as exc_info:
        _catalog(stub).check_login()

    assert exc_info.value.method == "flickr.test.login"


def test_service_failure_raises_catalog_error():
    stub = FlickrStub({"flickr.photos.geo.getLocation": {"stat": "fail", "code": 2, "message": "No location"}})

    with pytest.raises(CatalogError) as exc_info:
        _catalog(stub).get_location("43")

    assert not isinstance(exc_info.value, CatalogAuthError)
    assert exc_info.value.details == {"code": 2}


def test_http_error_raises_catalog_error():
    stub = FlickrStub({"flickr.photos.getPerms": httpx.Response(503)})

    with pytest.raises(CatalogError) as exc_info:
        _catalog(stub).get_permissions("42")

    assert exc_info.value.details == {"status": 503}
