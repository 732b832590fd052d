"""Order domain constants.

Defines the status choices of the order lifecycle:

    CREATED -> CONFIRMED -> PREPARING -> OUT_FOR_DELIVERY -> DELIVERED

CANCELLED is reachable from every non-terminal status.  DELIVERED and
CANCELLED are terminal.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    CREATED = "CREATED", "Created"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PREPARING = "PREPARING", "Preparing"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY", "Out for delivery"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"


TERMINAL_STATES: frozenset[str] = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED}
)

ZERO_AMOUNT = Decimal("0.00")

# Largest value the 12-digit, 2-decimal amount columns can hold.
MAX_ORDER_AMOUNT = Decimal("9999999999.99")
