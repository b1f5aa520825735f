"""
Catalog Service

Read-only product listing from the Fake Store API. Products are fetched
once per page load; failures surface as a single user-visible message
and are not retried.
"""

import os
from typing import List, Optional

import httpx
from pydantic import ValidationError

from storefront.logging import get_logger
from storefront.services.models import Product

logger = get_logger(__name__)

FAKESTORE_API_URL = os.environ.get("FAKESTORE_API_URL", "https://fakestoreapi.com")


class CatalogUnavailableError(Exception):
    """The catalog could not be fetched or returned an unusable payload."""


class CatalogClient:
    """Async client for the product catalog."""

    def __init__(
        self,
        base_url: str = FAKESTORE_API_URL,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def list_products(self) -> List[Product]:
        """
        Fetch every product.

        Raises:
            CatalogUnavailableError: on transport errors, non-2xx responses
                or a payload that is not a list of products
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.get("/products")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch products: {e}")
            raise CatalogUnavailableError("Failed to fetch products") from e
        except ValueError as e:
            logger.error(f"Catalog returned invalid JSON: {e}")
            raise CatalogUnavailableError("Invalid catalog response") from e

        if not isinstance(data, list):
            logger.error(f"Catalog returned {type(data).__name__} instead of a list")
            raise CatalogUnavailableError("Invalid catalog response")

        try:
            return [Product.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error(f"Catalog returned malformed products: {e}")
            raise CatalogUnavailableError("Invalid catalog response") from e

    async def get_product(self, product_id: int) -> Optional[Product]:
        """Single product by id, or None if the catalog does not list it."""
        products = await self.list_products()
        return next((p for p in products if p.id == product_id), None)


def search_products(products: List[Product], query: Optional[str]) -> List[Product]:
    """
    Case-insensitive title filter; a blank query keeps everything.

    The query is stripped first, so stray spaces typed around a search
    term do not hide matches.
    """
    if not query or not query.strip():
        return list(products)
    needle = query.strip().lower()
    return [p for p in products if needle in p.title.lower()]
