"""
Money helpers for order pricing.

Prices are Decimal everywhere on the server. Floats coming from JSON are
converted through str() so 0.1 stays 0.1 and not 0.1000000000000000055.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Normalize a price to a two-decimal Decimal (half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(
    unit_price: Decimal,
    addon_prices: Iterable[Decimal],
    quantity: int,
) -> Decimal:
    """(unit price + sum of add-on prices) x quantity, in cents."""
    per_unit = to_money(unit_price) + sum((to_money(p) for p in addon_prices), Decimal("0"))
    return to_money(per_unit * quantity)


def order_total(lines: Iterable[tuple[Decimal, Iterable[Decimal], int]]) -> Decimal:
    """
    Total for a whole order.

    Each element is (unit_price, addon_prices, quantity). Every line is
    rounded to cents before summing so the stored total always equals the
    sum of the stored line totals.
    """
    return to_money(
        sum((line_total(unit, addons, qty) for unit, addons, qty in lines), Decimal("0"))
    )


def totals_match(expected: Decimal, received: Decimal | float | str, tolerance: float) -> bool:
    """True when a client-supplied total is within tolerance of the server total."""
    received_dec = received if isinstance(received, Decimal) else Decimal(str(received))
    return abs(to_money(expected) - received_dec) <= Decimal(str(tolerance))
