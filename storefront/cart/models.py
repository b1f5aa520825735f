"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from storefront.services.money import to_decimal, to_float, multiply, total_of


def _finite_decimal(value, name: str) -> Decimal:
    """Snapshot number as Decimal; NaN, infinities and non-numbers are malformed."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"{name} must be a number, got {type(value).__name__}")
    try:
        number = Decimal(repr(value) if isinstance(value, float) else value)
    except InvalidOperation as e:
        raise ValueError(f"{name} is not a number: {value!r}") from e
    if not number.is_finite():
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


@dataclass
class CartLine:
    """One distinct product in the cart."""
    product_id: int
    title: str
    unit_price: Decimal
    quantity: int = 1

    def __post_init__(self):
        self.unit_price = to_decimal(self.unit_price)

    @property
    def line_total(self) -> Decimal:
        """Price for all units of this line."""
        return multiply(self.unit_price, self.quantity)

    def to_dict(self) -> dict:
        """Snapshot record: {id, title, price, quantity}."""
        return {
            "id": self.product_id,
            "title": self.title,
            "price": to_float(self.unit_price),
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        """
        Create from a snapshot record.

        A missing or zero quantity counts as one unit.

        Raises:
            KeyError, TypeError, ValueError: if the record is malformed,
                including non-finite prices or quantities
        """
        if not isinstance(data, dict):
            raise TypeError(f"cart line must be an object, got {type(data).__name__}")
        price = _finite_decimal(data["price"], "price")
        quantity = int(_finite_decimal(data.get("quantity") or 1, "quantity"))
        return cls(
            product_id=int(data["id"]),
            title=str(data["title"]),
            unit_price=price,
            quantity=max(quantity, 1),
        )


@dataclass
class Cart:
    """Ordered collection of cart lines, one per product id."""
    lines: List[CartLine] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        """Sum of unit_price * quantity, computed from scratch."""
        return total_of(line.line_total for line in self.lines)

    @property
    def total_items(self) -> int:
        """Number of units across all lines."""
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def find(self, product_id: int) -> Optional[CartLine]:
        """Line for the product, or None."""
        return next((line for line in self.lines if line.product_id == product_id), None)

    def copy(self) -> "Cart":
        """Copy whose lines can be mutated without touching this cart."""
        return Cart(lines=[replace(line) for line in self.lines])

    def to_snapshot(self) -> list:
        """Convert to the list persisted as the cart snapshot."""
        return [line.to_dict() for line in self.lines]

    @classmethod
    def from_snapshot(cls, data) -> "Cart":
        """
        Create from a decoded snapshot.

        Repeated product ids are merged into the first line so the
        one-line-per-product invariant holds for hand-edited snapshots.

        Raises:
            KeyError, TypeError, ValueError: if the snapshot is malformed
        """
        if not isinstance(data, list):
            raise TypeError(f"cart snapshot must be a list, got {type(data).__name__}")
        cart = cls()
        for record in data:
            line = CartLine.from_dict(record)
            existing = cart.find(line.product_id)
            if existing:
                existing.quantity += line.quantity
            else:
                cart.lines.append(line)
        return cart
