"""Order, OrderItem, and OrderStatusHistory models.

Business rules implemented:
- ``total_amount`` is never set directly: it is always recomputed from
  the item list (``Order.recalculate_total``).
- ``placed_at`` is stamped once, when the order is created.
- OrderItem snapshots the product price at the time it is added
  (``unit_price``) and that snapshot never changes afterwards.
- OrderItem subtotal is always ``quantity * unit_price`` (calculated on save).
- Items keep their insertion order through ``position``.
- Every status change generates a history record (service layer).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.orders.constants import TERMINAL_STATES, ZERO_AMOUNT, OrderStatus
from modules.orders.pricing import compute_total, line_subtotal

logger = structlog.get_logger(__name__)


class Order(BaseModel):
    """Order aggregate root.

    ``customer_id`` and ``restaurant_id`` are references into services this
    module does not own, so they are plain integers rather than foreign keys.
    """

    customer_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        db_index=True
    )
    restaurant_id: models.PositiveBigIntegerField = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        db_index=True,
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.CREATED,
    )
    total_amount: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=ZERO_AMOUNT,
        editable=False,
    )
    placed_at: models.DateTimeField = models.DateTimeField(
        default=timezone.now,
        editable=False,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-placed_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-placed_at"], name="orders_placed_idx"),
            models.Index(
                fields=["status", "-placed_at"], name="orders_status_placed_idx"
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def next_item_position(self) -> int:
        last = self.items.aggregate(last=models.Max("position"))["last"]
        return 0 if last is None else last + 1

    def recalculate_total(self) -> Decimal:
        """Replace ``total_amount`` with the sum over the persisted items.

        Reads the items straight from the database so a stale prefetch
        cache can never leak into the total.
        """
        self.total_amount = compute_total(self.items.order_by("position"))
        return self.total_amount

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Order {self.id} ({self.status})"


class OrderItem(BaseModel):
    """Line item linking an Order to a Product.

    ``unit_price`` is a **snapshot** of the product price at the time the
    item was added; it never changes even if the product price is updated
    later.  ``subtotal`` is always ``quantity * unit_price``.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField()
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    unit_price: models.DecimalField = models.DecimalField(
        max_digits=10,
        decimal_places=2,
    )
    subtotal: models.DecimalField = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        db_table = "order_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.UniqueConstraint(
                fields=["order", "position"],
                name="order_items_order_position_uniq",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < 1:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self._state.adding:
            if self.unit_price is None:
                unit_price = getattr(self.product, "price", None)
                if unit_price is None:
                    raise ValidationError({"unit_price": "Product price is required."})
                self.unit_price = unit_price
        else:
            self._reject_price_change()
        self.subtotal = line_subtotal(Decimal(self.unit_price), self.quantity)
        super().save(*args, **kwargs)

    def _reject_price_change(self) -> None:
        stored = (
            OrderItem.objects.filter(pk=self.pk)
            .values_list("unit_price", flat=True)
            .first()
        )
        if stored is not None and stored != self.unit_price:
            logger.warning(
                "order_item.price_change_rejected",
                item_id=str(self.pk),
                stored=str(stored),
                attempted=str(self.unit_price),
            )
            raise ValidationError(
                {"unit_price": "Unit price is fixed once the item is created."}
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_id} x{self.quantity} (${self.subtotal})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    ``old_status`` is ``None`` only for the record written when the order
    is created.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
    )
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["order", "created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
