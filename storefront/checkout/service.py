"""
Checkout Service

Turns the cart plus a validated contact form into a checkout record,
hands it to the sink and clears the cart once the sink accepts it. A
rejected submission leaves the cart intact so the user can retry.
"""

import os
from dataclasses import dataclass
from typing import Optional

from supabase import Client

from storefront.auth.session import IdentityProvider
from storefront.cart.models import Cart
from storefront.cart.service import CartStore
from storefront.errors import (
    ERROR_LOGIN_REQUIRED,
    ERROR_SESSION_EXPIRED,
    ERROR_CART_EMPTY,
    ERROR_CHECKOUT_SAVE_FAILED,
)
from storefront.logging import get_logger, sanitize_string_for_logging
from storefront.services.money import format_amount, to_float
from .models import CheckoutForm, CheckoutItem, CheckoutRecord

logger = get_logger(__name__)

CHECKOUT_TABLE = os.environ.get("CHECKOUT_TABLE", "checkout")

# Clients wait this long before following redirect_to
REDIRECT_DELAY_SECONDS = 2


class CheckoutError(Exception):
    """Checkout could not proceed; the message is shown to the user."""

    def __init__(self, message: str, status_code: int = 400, redirect_to: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.redirect_to = redirect_to

    def to_detail(self) -> dict:
        detail = {"message": self.message, "redirect_to": self.redirect_to}
        if self.redirect_to:
            detail["redirect_delay_seconds"] = REDIRECT_DELAY_SECONDS
        return detail


@dataclass
class SubmitResult:
    ok: bool
    reason: Optional[str] = None


@dataclass
class CheckoutReceipt:
    """Accepted order; cart_cleared is False if the cart could not be emptied afterwards."""
    record: CheckoutRecord
    cart_cleared: bool


class SupabaseCheckoutSink:
    """Durable record of completed orders in a Supabase table."""

    def __init__(self, client: Client, table: str = CHECKOUT_TABLE):
        self.client = client
        self.table = table

    def submit_order(self, record: CheckoutRecord) -> SubmitResult:
        """Insert the record; never raises."""
        try:
            self.client.table(self.table).insert(record.model_dump()).execute()
        except Exception as e:
            reason = getattr(e, "message", None) or str(e) or None
            logger.error(f"Checkout insert failed: {reason}", exc_info=True)
            return SubmitResult(ok=False, reason=reason)
        return SubmitResult(ok=True)


def build_checkout_record(email: str, form: CheckoutForm, cart: Cart) -> CheckoutRecord:
    """Record for the sink from the session email, form and cart."""
    return CheckoutRecord(
        user_email=email,
        name=form.name,
        phone_number=form.phone_number,
        address=form.address,
        items=[
            CheckoutItem(name=line.title, price=to_float(line.unit_price), quantity=line.quantity)
            for line in cart.lines
        ],
        total_price=format_amount(cart.total),
    )


class CheckoutService:
    """Checkout flow: session gate, record assembly, submission, cart clearing."""

    def __init__(self, identity: IdentityProvider, sink: SupabaseCheckoutSink):
        self.identity = identity
        self.sink = sink

    def submit(self, access_token: Optional[str], form: CheckoutForm, cart_store: CartStore) -> CheckoutReceipt:
        """
        Submit the cart as an order.

        Args:
            access_token: the user's Supabase access token (may be None)
            form: validated contact details
            cart_store: the cart being checked out

        Returns:
            The record accepted by the sink and whether the cart was cleared

        Raises:
            CheckoutError: missing session (401), empty cart (400),
                session without email (401), or sink failure (502)
        """
        cart_store.initialize()

        session = self.identity.get_current_session(access_token)
        if session is None:
            raise CheckoutError(ERROR_LOGIN_REQUIRED, status_code=401, redirect_to="/login")

        cart = cart_store.cart
        if cart.is_empty:
            raise CheckoutError(ERROR_CART_EMPTY, status_code=400, redirect_to="/")

        if not session.email:
            raise CheckoutError(ERROR_SESSION_EXPIRED, status_code=401, redirect_to="/login")

        record = build_checkout_record(session.email, form, cart)
        result = self.sink.submit_order(record)
        if not result.ok:
            raise CheckoutError(result.reason or ERROR_CHECKOUT_SAVE_FAILED, status_code=502)

        logger.info(
            f"Checkout saved for {sanitize_string_for_logging(session.email)}: "
            f"{len(record.items)} lines, total {record.total_price}"
        )
        cart_cleared = cart_store.clear_cart()
        if not cart_cleared:
            logger.error(
                f"Order saved for {sanitize_string_for_logging(session.email)} but the cart could not be cleared"
            )
        return CheckoutReceipt(record=record, cart_cleared=cart_cleared)
