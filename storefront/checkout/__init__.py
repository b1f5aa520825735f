"""Checkout package: form validation, record, sink and flow."""
from .models import CheckoutForm, CheckoutItem, CheckoutRecord
from .service import CheckoutError, CheckoutReceipt, CheckoutService, SubmitResult, SupabaseCheckoutSink, build_checkout_record

__all__ = [
    "CheckoutForm",
    "CheckoutItem",
    "CheckoutRecord",
    "CheckoutError",
    "CheckoutReceipt",
    "CheckoutService",
    "SubmitResult",
    "SupabaseCheckoutSink",
    "build_checkout_record",
]
