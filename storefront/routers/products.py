"""Product catalog endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.errors import ERROR_PRODUCTS_UNAVAILABLE, ERROR_PRODUCT_NOT_FOUND
from storefront.services.catalog import CatalogClient, CatalogUnavailableError, search_products
from storefront.services.money import to_float, format_money
from .deps import get_catalog_client

router = APIRouter(tags=["products"])


def _format_product(product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "price": to_float(product.price),
        "price_display": format_money(product.price),
        "description": product.description,
        "category": product.category,
        "image": product.image,
    }


@router.get("/products")
async def list_products(q: Optional[str] = None, catalog: CatalogClient = Depends(get_catalog_client)):
    """List catalog products, optionally filtered by title."""
    try:
        products = await catalog.list_products()
    except CatalogUnavailableError:
        raise HTTPException(status_code=502, detail=ERROR_PRODUCTS_UNAVAILABLE)

    return [_format_product(p) for p in search_products(products, q)]


@router.get("/products/{product_id}")
async def get_product(product_id: int, catalog: CatalogClient = Depends(get_catalog_client)):
    """Single catalog product."""
    try:
        product = await catalog.get_product(product_id)
    except CatalogUnavailableError:
        raise HTTPException(status_code=502, detail=ERROR_PRODUCTS_UNAVAILABLE)

    if product is None:
        raise HTTPException(status_code=404, detail=ERROR_PRODUCT_NOT_FOUND)
    return _format_product(product)
