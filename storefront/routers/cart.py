"""
Cart Router

Cart endpoints. They are plain (sync) functions: FastAPI runs them in
its thread pool, and the cart store serializes concurrent requests for
the same cart session.
"""
from fastapi import APIRouter, Depends

from storefront.cart.service import CartStore
from .deps import get_cart_store
from .models import AddToCartRequest

router = APIRouter(tags=["cart"])


@router.get("/cart")
def get_cart(store: CartStore = Depends(get_cart_store)):
    """Current cart with line totals and total."""
    return store.summary()


@router.post("/cart/add")
def add_to_cart(request: AddToCartRequest, store: CartStore = Depends(get_cart_store)):
    """Add a product (one more unit if it is already in the cart)."""
    store.add_to_cart(
        product_id=request.product_id,
        title=request.title,
        unit_price=request.price,
        quantity=request.quantity,
    )
    return store.summary()


@router.delete("/cart/item")
def remove_cart_item(product_id: int, store: CartStore = Depends(get_cart_store)):
    """Remove one unit of a product."""
    store.remove_from_cart(product_id)
    return store.summary()


@router.post("/cart/clear")
def clear_cart(store: CartStore = Depends(get_cart_store)):
    """Empty the cart and delete its snapshot."""
    cleared = store.clear_cart()
    return {**store.summary(), "cleared": cleared}
