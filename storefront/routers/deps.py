"""
Shared Dependencies for Routers

Lazy-loaded singletons to optimize cold start. Import heavy modules only
when needed. Tests replace these through app.dependency_overrides.
"""

import os
import secrets
from typing import Optional, TYPE_CHECKING

from fastapi import Cookie, Depends, Request, Response

from storefront.cart.service import CartStore, CartStoreRegistry
from storefront.cart.storage import get_default_storage

if TYPE_CHECKING:
    from storefront.checkout.service import CheckoutService
    from storefront.services.catalog import CatalogClient


CART_SESSION_COOKIE = os.environ.get("CART_SESSION_COOKIE", "cart_session")
CART_SESSION_MAX_AGE = 60 * 60 * 24 * 30  # matches TTL.CART
CART_REGISTRY_MAX_SESSIONS = int(os.environ.get("CART_REGISTRY_MAX_SESSIONS", "1024"))


# ==================== LAZY SINGLETONS ====================

_catalog_client: Optional["CatalogClient"] = None
_checkout_service: Optional["CheckoutService"] = None


def get_catalog_client() -> "CatalogClient":
    """Get or create CatalogClient singleton (lazy loaded)"""
    global _catalog_client
    if _catalog_client is None:
        from storefront.services.catalog import CatalogClient
        _catalog_client = CatalogClient()
    return _catalog_client


def get_checkout_service() -> "CheckoutService":
    """Get or create CheckoutService singleton (lazy loaded)"""
    global _checkout_service
    if _checkout_service is None:
        from storefront.checkout.service import CheckoutService, SupabaseCheckoutSink
        from storefront.auth.dependencies import get_identity_provider
        from storefront.db import get_supabase_sync
        _checkout_service = CheckoutService(get_identity_provider(), SupabaseCheckoutSink(get_supabase_sync()))
    return _checkout_service


# ==================== CART SESSION ====================

def create_cart_registry() -> CartStoreRegistry:
    """Registry backed by Redis when configured; attached to app.state at startup."""
    return CartStoreRegistry(get_default_storage, max_sessions=CART_REGISTRY_MAX_SESSIONS)


def get_cart_registry(request: Request) -> CartStoreRegistry:
    """The app's registry, created on first use if startup did not."""
    registry = getattr(request.app.state, "cart_registry", None)
    if registry is None:
        registry = create_cart_registry()
        request.app.state.cart_registry = registry
    return registry


def get_cart_session_id(
    response: Response,
    cart_session: Optional[str] = Cookie(None, alias=CART_SESSION_COOKIE),
) -> str:
    """Anonymous cart session id from the cookie; a new one is issued if absent."""
    if cart_session:
        return cart_session
    cart_session = secrets.token_urlsafe(24)
    response.set_cookie(
        CART_SESSION_COOKIE,
        cart_session,
        max_age=CART_SESSION_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return cart_session


def get_cart_store(
    cart_session_id: str = Depends(get_cart_session_id),
    registry: CartStoreRegistry = Depends(get_cart_registry),
) -> CartStore:
    """Initialized cart store for the caller's cart session."""
    return registry.get(cart_session_id)
