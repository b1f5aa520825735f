"""
Money helpers.

Prices and totals are Decimal from the moment they enter the cart;
floats exist only in JSON responses and in checkout line items.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable, Union

Number = Union[str, int, float, Decimal]

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Union[Number, None]) -> Decimal:
    """
    Price or amount as Decimal.

    None, booleans, NaN, infinities and anything unparsable become
    zero. Floats are read through their shortest repr, so 3.5 stays 3.5
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, float):
        value = repr(value)
    try:
        number = Decimal(value)
    except (InvalidOperation, ValueError, TypeError):
        return ZERO
    return number if number.is_finite() else ZERO


def round_money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Number) -> str:
    """Two decimals, no symbol or separators: "20.00"."""
    return f"{round_money(value):.2f}"


def format_money(value: Number) -> str:
    """Dollar display string such as "$1,234.50" or "-$5.00"."""
    amount = round_money(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def to_float(value: Number) -> float:
    """JSON-boundary conversion; never feed the result back into arithmetic."""
    return float(to_decimal(value))


def multiply(value: Number, factor: Number) -> Decimal:
    return to_decimal(value) * to_decimal(factor)


def total_of(amounts: Iterable[Number]) -> Decimal:
    """Exact sum; zero for nothing."""
    return sum((to_decimal(a) for a in amounts), ZERO)
