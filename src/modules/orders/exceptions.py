"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
derives from a shared error kind; the API exception handler translates
the kind into an HTTP response.
"""

from __future__ import annotations

from shared.domain.exceptions import (
    InvalidArgument,
    InvalidState,
    NotFound,
    Unavailable,
)


class OrderNotFound(NotFound):
    """The requested order does not exist."""

    code = "order_not_found"


class ProductNotFound(NotFound):
    """A product referenced by an order item does not exist."""

    code = "product_not_found"


class ProductUnavailable(Unavailable):
    """A product exists but is not currently orderable."""

    code = "product_unavailable"


class InvalidQuantity(InvalidArgument):
    """An item quantity is not a positive integer."""

    code = "invalid_quantity"


class InvalidStatusValue(InvalidArgument):
    """A status value is not one of ``OrderStatus``."""

    code = "invalid_status"


class InvalidOrderStatus(InvalidState):
    """The operation is not allowed from the order's current status."""

    code = "invalid_order_status"
