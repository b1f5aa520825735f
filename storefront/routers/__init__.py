"""
FastAPI Routers Package

All storefront endpoints, combined into one router with prefix /api.
Included by api/index.py.
"""

from fastapi import APIRouter

from .auth import router as auth_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .products import router as products_router

router = APIRouter(prefix="/api")

router.include_router(products_router)
router.include_router(cart_router)
router.include_router(auth_router)
router.include_router(checkout_router)

__all__ = ["router"]
