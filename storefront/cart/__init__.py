"""Cart package: models, storage, and the cart store."""
from .models import CartLine, Cart
from .service import CartStore, CartStoreRegistry
from .storage import CartStorage, MemoryCartStorage, RedisCartStorage, get_default_storage

__all__ = [
    "CartLine",
    "Cart",
    "CartStore",
    "CartStoreRegistry",
    "CartStorage",
    "MemoryCartStorage",
    "RedisCartStorage",
    "get_default_storage",
]
