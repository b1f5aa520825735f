"""Pytest configuration and fixtures"""
import os
import pytest
from unittest.mock import Mock

# Set test environment variables (Redis deliberately left unset)
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test_anon_key")

from storefront.cart import CartStore, MemoryCartStorage
from storefront.auth.session import AuthSession


@pytest.fixture
def memory_storage():
    """Empty in-process cart storage"""
    return MemoryCartStorage()


@pytest.fixture
def cart_store(memory_storage):
    """Initialized cart store over memory storage"""
    store = CartStore(memory_storage)
    store.initialize()
    return store


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client"""
    client = Mock()

    # Mock table operations
    table_mock = Mock()
    table_mock.select.return_value = table_mock
    table_mock.insert.return_value = table_mock
    table_mock.eq.return_value = table_mock

    client.table.return_value = table_mock

    return client


@pytest.fixture
def sample_product():
    """Sample catalog product as returned by the Fake Store API"""
    return {
        "id": 1,
        "title": "Fjallraven - Foldsack No. 1 Backpack, Fits 15 Laptops",
        "price": 109.95,
        "description": "Your perfect pack for everyday use and walks in the forest.",
        "category": "men's clothing",
        "image": "https://fakestoreapi.com/img/81fPKd-2AYL._AC_SL1500_.jpg",
        "rating": {"rate": 3.9, "count": 120},
    }


@pytest.fixture
def sample_session():
    """Logged-in user"""
    return AuthSession(user_id="user-123", email="shopper@example.com", access_token="token-123")


@pytest.fixture
def mock_identity(sample_session):
    """Identity provider that recognizes token-123"""
    identity = Mock()
    identity.get_current_session.side_effect = (
        lambda token: sample_session if token == "token-123" else None
    )
    return identity
