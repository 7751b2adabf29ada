"""Tests for the Open Food Facts client, using httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from isitsafe.services.product_lookup import (
    LookupErrorKind,
    OpenFoodFactsClient,
    ProductLookupError,
)

BASE_URL = "https://off.test/api/v0/product"

FOUND = {
    "code": "737628064502",
    "status": 1,
    "status_verbose": "product found",
    "product": {
        "code": "737628064502",
        "product_name": "Thai peanut noodle kit",
        "ingredients_text": "Rice Noodles (rice, water), seasoning packet (peanut, sugar, salt)",
        "brands": "Simply Asia",
        "nutriments": {"energy": 1778},
    },
}


def _client(handler) -> OpenFoodFactsClient:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenFoodFactsClient(base_url=BASE_URL, client=http)


def test_fetch_product_found():
    requested: list[httpx.URL] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url)
        return httpx.Response(200, json=FOUND)

    product = _client(handler).fetch_product("737628064502")

    assert str(requested[0]) == f"{BASE_URL}/737628064502.json"
    assert product.product_name == "Thai peanut noodle kit"
    assert product.code == "737628064502"
    assert product.ingredients_text.startswith("Rice Noodles")


def test_barcode_is_trimmed():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/737628064502.json")
        return httpx.Response(200, json=FOUND)

    assert _client(handler).fetch_product(" 737628064502\n").brands == "Simply Asia"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"status": 0, "status_verbose": "product not found", "code": "1"}),
        httpx.Response(200, json={"status": 1}),
        httpx.Response(404),
    ],
)
def test_not_found(response):
    with pytest.raises(ProductLookupError) as info:
        _client(lambda request: response).fetch_product("0000000000000")
    assert info.value.kind is LookupErrorKind.NOT_FOUND
    assert "0000000000000" in info.value.message


def test_blank_barcode_skips_the_network():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(ProductLookupError) as info:
        _client(handler).fetch_product("   ")
    assert info.value.kind is LookupErrorKind.NOT_FOUND


def test_timeout():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProductLookupError) as info:
        _client(handler).fetch_product("737628064502")
    assert info.value.kind is LookupErrorKind.TIMEOUT
    assert info.value.message == "Request timed out. Please check your connection."


def test_server_error_is_api_error():
    with pytest.raises(ProductLookupError) as info:
        _client(lambda request: httpx.Response(503)).fetch_product("737628064502")
    assert info.value.kind is LookupErrorKind.API_ERROR
    assert info.value.message.startswith("API Error:")


def test_connection_error_is_api_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProductLookupError) as info:
        _client(handler).fetch_product("737628064502")
    assert info.value.kind is LookupErrorKind.API_ERROR


@pytest.mark.parametrize("body", [b"<html>maintenance</html>", b'{"status": "weird"}'])
def test_unreadable_body_is_api_error(body):
    response = httpx.Response(200, content=body, headers={"Content-Type": "application/json"})
    with pytest.raises(ProductLookupError) as info:
        _client(lambda request: response).fetch_product("737628064502")
    assert info.value.kind is LookupErrorKind.API_ERROR


def test_injected_client_is_not_closed():
    http = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=FOUND)))
    with OpenFoodFactsClient(base_url=BASE_URL, client=http) as lookup:
        lookup.fetch_product("737628064502")
    assert not http.is_closed


def test_redirect_is_followed():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/737628064502.json"):
            return httpx.Response(301, headers={"Location": f"{BASE_URL}/0737628064502.json"})
        return httpx.Response(200, json=FOUND)

    product = _client(handler).fetch_product("737628064502")
    assert product.product_name == "Thai peanut noodle kit"


def test_owned_client_follows_redirects():
    lookup = OpenFoodFactsClient(base_url=BASE_URL)
    try:
        assert lookup._client.follow_redirects is True
    finally:
        lookup.close()
