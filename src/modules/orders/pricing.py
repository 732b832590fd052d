"""Order pricing.

``compute_total`` is the single place where an order total is derived.
It is pure: it never touches the database, and it works on anything
exposing ``unit_price`` and ``quantity`` (``OrderItem`` rows, priced
preview lines, test stubs).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Protocol

from modules.orders.constants import ZERO_AMOUNT


class PricedLine(Protocol):
    unit_price: Decimal
    quantity: int


def line_subtotal(unit_price: Decimal, quantity: int) -> Decimal:
    return unit_price * quantity


def compute_total(items: Optional[Iterable[PricedLine]]) -> Decimal:
    """Return Σ(unit_price × quantity); ``None`` or no items yields zero."""
    if items is None:
        return ZERO_AMOUNT
    return sum(
        (line_subtotal(item.unit_price, item.quantity) for item in items),
        ZERO_AMOUNT,
    )
