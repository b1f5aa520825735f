"""Tests for checkout form validation and the checkout flow"""
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from storefront.auth.session import AuthSession
from storefront.cart import CartStore
from storefront.checkout import (
    CheckoutError,
    CheckoutForm,
    CheckoutService,
    SubmitResult,
    SupabaseCheckoutSink,
)
from storefront.errors import (
    ERROR_LOGIN_REQUIRED,
    ERROR_SESSION_EXPIRED,
    ERROR_CART_EMPTY,
    ERROR_CHECKOUT_SAVE_FAILED,
    ERROR_NAME_TOO_SHORT,
    ERROR_INVALID_PHONE,
    ERROR_ADDRESS_TOO_SHORT,
)


@pytest.fixture
def form():
    return CheckoutForm(name="Ada Lovelace", phone_number="+447700900123", address="12 St James's Square")


@pytest.fixture
def sink():
    sink = Mock()
    sink.submit_order.return_value = SubmitResult(ok=True)
    return sink


@pytest.fixture
def service(mock_identity, sink):
    return CheckoutService(mock_identity, sink)


@pytest.fixture
def filled_store(cart_store):
    cart_store.add_to_cart(product_id=1, title="Shirt", unit_price="10.00")
    cart_store.add_to_cart(product_id=1, title="Shirt", unit_price="10.00")
    cart_store.add_to_cart(product_id=7, title="Mug", unit_price="3.5")
    return cart_store


# ==================== FORM ====================

class TestCheckoutForm:

    @pytest.mark.parametrize("phone", ["+14155552671", "14155552671", "447700900123", "+12"])
    def test_valid_phone_numbers(self, phone):
        assert CheckoutForm(name="Al", phone_number=phone, address="Main St").phone_number == phone

    @pytest.mark.parametrize("phone", ["", "+0123456", "0123456", "+1234567890123456", "555-1234", "+1"])
    def test_invalid_phone_numbers(self, phone):
        with pytest.raises(ValidationError, match=ERROR_INVALID_PHONE):
            CheckoutForm(name="Al", phone_number=phone, address="Main St")

    def test_short_name(self):
        with pytest.raises(ValidationError, match=ERROR_NAME_TOO_SHORT):
            CheckoutForm(name="A", phone_number="+14155552671", address="Main St")

    def test_short_address(self):
        with pytest.raises(ValidationError, match=ERROR_ADDRESS_TOO_SHORT):
            CheckoutForm(name="Al", phone_number="+14155552671", address="Home")

    def test_errors_reported_per_field(self):
        with pytest.raises(ValidationError) as exc_info:
            CheckoutForm(name="A", phone_number="nope", address="x")

        messages = {error["loc"][0]: error["msg"] for error in exc_info.value.errors()}
        assert messages == {
            "name": ERROR_NAME_TOO_SHORT,
            "phone_number": ERROR_INVALID_PHONE,
            "address": ERROR_ADDRESS_TOO_SHORT,
        }


# ==================== FLOW ====================

def test_submit_success_clears_cart(service, sink, filled_store, form, memory_storage):
    """Test that a successful submission sends the record and clears the cart"""
    receipt = service.submit("token-123", form, filled_store)
    record = receipt.record

    assert receipt.cart_cleared is True
    assert record.user_email == "shopper@example.com"
    assert record.total_price == "23.50"
    assert [(item.name, item.price, item.quantity) for item in record.items] == [
        ("Shirt", 10.0, 2),
        ("Mug", 3.5, 1),
    ]
    sink.submit_order.assert_called_once_with(record)
    assert filled_store.cart.is_empty
    assert memory_storage.get("cart") is None


def test_submit_reports_cart_not_cleared(mock_identity, sink, memory_storage, form, caplog):
    """Test that an order saved while the cart delete fails is reported, not hidden"""
    storage = Mock(wraps=memory_storage)
    store = CartStore(storage)
    store.add_to_cart(product_id=1, title="Shirt", unit_price="10.00")
    storage.delete.side_effect = ConnectionError("redis down")

    receipt = CheckoutService(mock_identity, sink).submit("token-123", form, store)

    assert receipt.cart_cleared is False
    assert receipt.record.total_price == "10.00"
    assert store.total_items == 1
    assert "could not be cleared" in caplog.text


def test_submit_without_session(service, sink, filled_store, form):
    with pytest.raises(CheckoutError) as exc_info:
        service.submit(None, form, filled_store)

    assert exc_info.value.message == ERROR_LOGIN_REQUIRED
    assert exc_info.value.status_code == 401
    assert exc_info.value.redirect_to == "/login"
    sink.submit_order.assert_not_called()
    assert filled_store.total_items == 3


def test_submit_empty_cart(service, sink, cart_store, form):
    with pytest.raises(CheckoutError) as exc_info:
        service.submit("token-123", form, cart_store)

    assert exc_info.value.message == ERROR_CART_EMPTY
    assert exc_info.value.redirect_to == "/"
    sink.submit_order.assert_not_called()


def test_submit_session_without_email(sink, filled_store, form):
    identity = Mock()
    identity.get_current_session.return_value = AuthSession(user_id="u", email=None, access_token="t")
    service = CheckoutService(identity, sink)

    with pytest.raises(CheckoutError) as exc_info:
        service.submit("t", form, filled_store)

    assert exc_info.value.message == ERROR_SESSION_EXPIRED
    assert exc_info.value.redirect_to == "/login"


def test_submit_sink_failure_keeps_cart(service, sink, filled_store, form):
    """Test that a rejected submission leaves the cart for a retry"""
    sink.submit_order.return_value = SubmitResult(ok=False, reason="new row violates row-level security policy")

    with pytest.raises(CheckoutError) as exc_info:
        service.submit("token-123", form, filled_store)

    assert exc_info.value.message == "new row violates row-level security policy"
    assert exc_info.value.status_code == 502
    assert exc_info.value.redirect_to is None
    assert filled_store.total_items == 3


def test_submit_sink_failure_without_reason(service, sink, filled_store, form):
    sink.submit_order.return_value = SubmitResult(ok=False)

    with pytest.raises(CheckoutError, match=ERROR_CHECKOUT_SAVE_FAILED):
        service.submit("token-123", form, filled_store)


def test_error_detail_includes_redirect_delay():
    detail = CheckoutError(ERROR_LOGIN_REQUIRED, status_code=401, redirect_to="/login").to_detail()

    assert detail == {"message": ERROR_LOGIN_REQUIRED, "redirect_to": "/login", "redirect_delay_seconds": 2}


# ==================== SINK ====================

def test_sink_inserts_record(mock_supabase_client, filled_store, form):
    from storefront.checkout import build_checkout_record

    record = build_checkout_record("shopper@example.com", form, filled_store.cart)

    result = SupabaseCheckoutSink(mock_supabase_client).submit_order(record)

    assert result.ok
    mock_supabase_client.table.assert_called_once_with("checkout")
    inserted = mock_supabase_client.table.return_value.insert.call_args[0][0]
    assert inserted["total_price"] == "23.50"
    assert inserted["items"][0] == {"name": "Shirt", "price": 10.0, "quantity": 2}


def test_sink_reports_failure(mock_supabase_client, filled_store, form):
    from storefront.checkout import build_checkout_record

    mock_supabase_client.table.return_value.execute.side_effect = RuntimeError("connection reset")
    record = build_checkout_record("shopper@example.com", form, filled_store.cart)

    result = SupabaseCheckoutSink(mock_supabase_client).submit_order(record)

    assert result.ok is False
    assert result.reason == "connection reset"
