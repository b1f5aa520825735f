"""Tests for the product catalog client"""
import httpx
import pytest

from storefront.services.catalog import CatalogClient, CatalogUnavailableError, search_products
from storefront.services.models import Product


def _client(handler) -> CatalogClient:
    return CatalogClient(base_url="https://catalog.test", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_products(sample_product):
    """Test listing products from the catalog"""
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        return httpx.Response(200, json=[sample_product])

    products = await _client(handler).list_products()

    assert requested == ["/products"]
    assert len(products) == 1
    assert products[0].title.startswith("Fjallraven")


@pytest.mark.asyncio
async def test_list_products_server_error():
    """Test that a 5xx is reported as unavailable, without retry"""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503)

    with pytest.raises(CatalogUnavailableError):
        await _client(handler).list_products()
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_list_products_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    with pytest.raises(CatalogUnavailableError):
        await _client(handler).list_products()


@pytest.mark.asyncio
async def test_list_products_invalid_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>")

    with pytest.raises(CatalogUnavailableError):
        await _client(handler).list_products()


@pytest.mark.asyncio
async def test_list_products_not_a_list():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"products": []})

    with pytest.raises(CatalogUnavailableError):
        await _client(handler).list_products()


@pytest.mark.asyncio
async def test_list_products_malformed_item():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": 1}])

    with pytest.raises(CatalogUnavailableError):
        await _client(handler).list_products()


@pytest.mark.asyncio
async def test_get_product(sample_product):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[sample_product])

    client = _client(handler)

    assert (await client.get_product(1)).id == 1
    assert await client.get_product(2) is None


def test_search_products_case_insensitive():
    products = [
        Product(id=1, title="Mens Casual Slim Fit", price=15.99),
        Product(id=2, title="WD 2TB Elements Portable", price=64),
        Product(id=3, title="Womens Casual Jacket", price=39.99),
    ]

    assert [p.id for p in search_products(products, "casual")] == [1, 3]
    assert [p.id for p in search_products(products, "  wd ")] == [2]
    assert search_products(products, "") == products
    assert search_products(products, None) == products
    assert search_products(products, "laptop") == []


def test_search_products_ignores_surrounding_whitespace():
    products = [
        Product(id=1, title="Solid Gold Petite Micropave", price=168),
        Product(id=2, title="White Gold Plated Princess", price=9.99),
    ]

    assert [p.id for p in search_products(products, "   ")] == [1, 2]
    assert [p.id for p in search_products(products, " gold p")] == [1, 2]
    assert [p.id for p in search_products(products, "micropave ")] == [1]
