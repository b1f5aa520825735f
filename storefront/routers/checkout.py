"""Checkout endpoint."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from storefront.auth.dependencies import get_access_token
from storefront.cart.service import CartStore
from storefront.checkout.models import CheckoutForm
from storefront.checkout.service import CheckoutError, CheckoutService, REDIRECT_DELAY_SECONDS
from storefront.errors import ERROR_INTERNAL, MESSAGE_CHECKOUT_SUCCESS
from storefront.logging import get_logger
from .deps import get_cart_store, get_checkout_service

logger = get_logger(__name__)

router = APIRouter(tags=["checkout"])


@router.post("/checkout")
def checkout(
    form: CheckoutForm,
    access_token: Optional[str] = Depends(get_access_token),
    store: CartStore = Depends(get_cart_store),
    service: CheckoutService = Depends(get_checkout_service),
):
    """
    Submit the cart with the contact form.

    Field validation errors come back as 422 per field. Flow errors carry
    a message and, where the user has to go elsewhere, redirect_to.
    """
    try:
        receipt = service.submit(access_token, form, store)
    except CheckoutError as e:
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
    except Exception as e:
        logger.error(f"Checkout failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"message": ERROR_INTERNAL, "redirect_to": None})

    return {
        "message": MESSAGE_CHECKOUT_SUCCESS,
        "order": receipt.record.model_dump(),
        "cart_cleared": receipt.cart_cleared,
        "redirect_to": "/",
        "redirect_delay_seconds": REDIRECT_DELAY_SECONDS,
    }
