"""Price validation for catalog products."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from modules.products.exceptions import InvalidPrice

MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("99999.99")


def validate_price(price: Any) -> Decimal:
    """Return ``price`` as a Decimal or raise ``InvalidPrice``."""
    if price is None:
        raise InvalidPrice("price is required")
    try:
        value = Decimal(str(price))
    except InvalidOperation:
        raise InvalidPrice(f"price {price!r} is not a number", identifier=price) from None
    if not value.is_finite():
        raise InvalidPrice(f"price {price!r} is not a number", identifier=price)
    if value <= 0:
        raise InvalidPrice("price must be greater than zero", identifier=price)
    if value > MAX_PRICE:
        raise InvalidPrice(f"price cannot exceed {MAX_PRICE}", identifier=price)
    return value
