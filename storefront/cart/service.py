"""Cart store with write-through persistence, and the per-session registry."""
import json
import threading
from collections import OrderedDict
from decimal import Decimal
from typing import Callable, List, Optional

from storefront.logging import get_logger, sanitize_id_for_logging
from storefront.services.money import to_decimal, to_float, format_money
from .models import CartLine, Cart
from .storage import CartStorage

logger = get_logger(__name__)

CART_STORAGE_KEY = "cart"

# Snapshot problems that mean "start over with an empty cart"
SNAPSHOT_ERRORS = (json.JSONDecodeError, KeyError, TypeError, ValueError, ArithmeticError)


def _reject_constant(name: str):
    raise ValueError(f"non-finite number {name} in cart snapshot")


class CartStore:
    """
    Single source of truth for one cart session's contents and total.

    Storage is authoritative. Every read and mutation first reloads the
    snapshot, so several stores (other workers, other instances) sharing
    one cart see each other's writes instead of overwriting them. Every
    mutation recomputes the total from scratch and writes the snapshot
    before the new state becomes visible. If the write fails the previous
    state is kept. No method raises; storage problems are logged and
    degrade to an empty or unchanged cart.

    Usage:
        store = CartStore(MemoryCartStorage())
        store.initialize()
        store.add_to_cart(product_id=1, title="Backpack", unit_price="109.95")
        store.remove_from_cart(1)
        store.clear_cart()
    """

    def __init__(self, storage: Optional[CartStorage], key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._cart = Cart()
        self._total = Decimal("0")
        self._initialized = False
        self._lock = threading.RLock()

    # ==================== STATE ====================

    @property
    def cart(self) -> Cart:
        """Copy of the current cart."""
        with self._lock:
            self._sync()
            return self._cart.copy()

    @property
    def lines(self) -> List[CartLine]:
        return self.cart.lines

    @property
    def total_price(self) -> Decimal:
        with self._lock:
            self._sync()
            return self._total

    @property
    def total_items(self) -> int:
        with self._lock:
            self._sync()
            return self._cart.total_items

    @property
    def is_loading(self) -> bool:
        """True until the snapshot has been read once."""
        return not self._initialized

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ==================== PERSISTENCE ====================

    def _read_snapshot(self) -> Optional[Cart]:
        """
        Load the persisted cart.

        Returns an empty cart when there is no snapshot or it is corrupt,
        and None when storage could not be read at all.
        """
        try:
            raw = self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read cart snapshot: {e}")
            return None

        if not raw:
            return Cart()

        try:
            return Cart.from_snapshot(json.loads(raw, parse_constant=_reject_constant))
        except SNAPSHOT_ERRORS as e:
            logger.warning(f"Error parsing cart snapshot, starting with an empty cart: {e}")
            return Cart()

    def _write_snapshot(self, cart: Cart) -> bool:
        """Persist the cart; False if storage rejected the write."""
        if self.storage is None:
            return True
        try:
            self.storage.set(self.key, json.dumps(cart.to_snapshot()))
            return True
        except Exception as e:
            logger.error(f"Failed to write cart snapshot: {e}")
            return False

    def _apply(self, cart: Cart) -> None:
        self._cart = cart
        self._total = cart.total

    def _commit(self, cart: Cart) -> bool:
        """Write the snapshot, then swap in the new state."""
        if not self._write_snapshot(cart):
            return False
        self._apply(cart)
        return True

    def _sync(self) -> bool:
        """
        Reload the cart from storage; caller holds the lock.

        Returns False when storage could not be read, in which case the
        last known state is kept.
        """
        self._initialized = True
        if self.storage is None:
            return True
        cart = self._read_snapshot()
        if cart is None:
            return False
        self._apply(cart)
        return True

    # ==================== OPERATIONS ====================

    def initialize(self, force: bool = False) -> None:
        """
        Rehydrate from the persisted snapshot.

        Calls after the first one are no-ops unless force=True, which
        re-reads storage as a fresh session would. Unreadable storage
        gives an empty cart.
        """
        with self._lock:
            if self._initialized and not force:
                return
            if self.storage is None:
                logger.debug("No durable storage available, starting with an empty cart")
                self._apply(Cart())
                self._initialized = True
            elif not self._sync():
                self._apply(Cart())
            logger.debug(f"Cart initialized with {len(self._cart.lines)} lines")

    def add_to_cart(
        self,
        product_id: int,
        title: str,
        unit_price,
        quantity: Optional[int] = 1,
    ) -> Cart:
        """
        Add a product.

        A product already in the cart gains exactly one unit regardless of
        the requested quantity. A new product gets the requested quantity,
        with None, zero or negative values treated as one. Prices are not
        validated.

        Returns:
            The cart after the operation
        """
        with self._lock:
            if not self._sync():
                logger.warning("Cart storage unreadable, add skipped")
                return self._cart.copy()
            cart = self._cart.copy()

            existing = cart.find(product_id)
            if existing:
                existing.quantity += 1
            else:
                cart.lines.append(
                    CartLine(
                        product_id=product_id,
                        title=title,
                        unit_price=to_decimal(unit_price),
                        quantity=max(quantity or 1, 1),
                    )
                )

            self._commit(cart)
            return self._cart.copy()

    def remove_from_cart(self, product_id: int) -> Cart:
        """
        Take one unit of a product out of the cart.

        The line disappears when its last unit is removed. Unknown ids
        leave both the cart and the snapshot untouched.

        Returns:
            The cart after the operation
        """
        with self._lock:
            if not self._sync():
                logger.warning("Cart storage unreadable, remove skipped")
                return self._cart.copy()
            if self._cart.find(product_id) is None:
                return self._cart.copy()

            cart = self._cart.copy()
            line = cart.find(product_id)
            if line.quantity > 1:
                line.quantity -= 1
            else:
                cart.lines = [item for item in cart.lines if item.product_id != product_id]

            self._commit(cart)
            return self._cart.copy()

    def clear_cart(self) -> bool:
        """
        Empty the cart and delete the snapshot entirely.

        Returns:
            True if cleared, False if storage refused the delete
        """
        with self._lock:
            if self.storage is not None:
                try:
                    self.storage.delete(self.key)
                except Exception as e:
                    logger.error(f"Failed to delete cart snapshot: {e}")
                    return False
            self._apply(Cart())
            self._initialized = True
            return True

    def summary(self) -> dict:
        """JSON-ready view of the cart for API responses."""
        with self._lock:
            self._sync()
            return {
                "is_empty": self._cart.is_empty,
                "total_items": self._cart.total_items,
                "items": [
                    {
                        "id": line.product_id,
                        "title": line.title,
                        "price": to_float(line.unit_price),
                        "quantity": line.quantity,
                        "line_total": to_float(line.line_total),
                        "price_display": format_money(line.unit_price),
                        "line_total_display": format_money(line.line_total),
                    }
                    for line in self._cart.lines
                ],
                "total": to_float(self._total),
                "total_display": format_money(self._total),
            }


class CartStoreRegistry:
    """
    Owns one CartStore per cart session.

    A store is what serializes requests for its session within this
    process; the cart itself lives in storage and is reloaded on every
    access. Stores are created and initialized on first access and the
    least recently used ones are dropped past max_sessions.
    """

    def __init__(
        self,
        storage_factory: Callable[[str], Optional[CartStorage]],
        max_sessions: int = 1024,
    ):
        if max_sessions < 1:
            raise ValueError("max_sessions must be a positive integer")
        self.storage_factory = storage_factory
        self.max_sessions = max_sessions
        self._stores: "OrderedDict[str, CartStore]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, cart_session_id: str) -> CartStore:
        """Store for the session, created and initialized if needed."""
        with self._lock:
            store = self._stores.get(cart_session_id)
            if store is not None:
                self._stores.move_to_end(cart_session_id)
                return store

            store = CartStore(self.storage_factory(cart_session_id))
            self._stores[cart_session_id] = store
            while len(self._stores) > self.max_sessions:
                evicted_id, _ = self._stores.popitem(last=False)
                logger.debug(f"Evicted cart store {sanitize_id_for_logging(evicted_id)}")

        store.initialize()
        return store

    def discard(self, cart_session_id: str) -> bool:
        """Drop the session's store; its snapshot stays in storage."""
        with self._lock:
            return self._stores.pop(cart_session_id, None) is not None

    def __contains__(self, cart_session_id: str) -> bool:
        return cart_session_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)
