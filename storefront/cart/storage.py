"""Durable key-value storage for cart snapshots."""
import threading
from typing import Dict, Optional, Protocol

from upstash_redis import Redis

from storefront.db import get_redis_sync, is_redis_configured, RedisKeys, TTL
from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)


class CartStorage(Protocol):
    """Synchronous key-value capability the cart store persists into."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class RedisCartStorage:
    """
    Cart storage scoped to one cart session in Upstash Redis.

    Holds a single snapshot: whatever logical key the cart store passes,
    the value lives at cart:{cart_session_id}, so sessions never see each
    other's carts.
    """

    def __init__(self, redis: Redis, namespace: str, ttl: int = TTL.CART):
        self.redis = redis
        self.namespace = namespace
        self.ttl = ttl

    @property
    def redis_key(self) -> str:
        return RedisKeys.cart_key(self.namespace)

    def get(self, key: str) -> Optional[str]:
        return self.redis.get(self.redis_key)

    def set(self, key: str, value: str) -> None:
        self.redis.set(self.redis_key, value, ex=self.ttl)

    def delete(self, key: str) -> None:
        self.redis.delete(self.redis_key)


class MemoryCartStorage:
    """Process-local storage; one instance per cart session."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


def get_default_storage(cart_session_id: str) -> Optional[CartStorage]:
    """
    Storage for a cart session: Redis when configured, otherwise None.

    None means no durable storage is available; the cart store then keeps
    an empty, in-memory-only cart.
    """
    if not is_redis_configured():
        logger.debug(
            f"Redis not configured, cart {sanitize_id_for_logging(cart_session_id)} is not persisted"
        )
        return None
    return RedisCartStorage(get_redis_sync(), cart_session_id)
