"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Concurrency control on mutations uses ``select_for_update()``: the
service locks the order row for the length of its transaction, which
serializes read-modify-persist sequences on the same order.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from modules.products.models import Product

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read (single aggregate)
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with eager-loaded items and history.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.prefetch_related("items__product", "status_history")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Items are deliberately not prefetched: callers mutate the item
        list while holding the lock and must read it fresh.  Returns
        ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order; the id is assigned on first save."""
        entity.save()
        logger.info(
            "order.saved",
            order_id=str(entity.id),
            status=entity.status,
            total_amount=str(entity.total_amount),
        )
        return entity

    @transaction.atomic
    def delete(self, entity: Order) -> None:
        """Physically remove an order together with its items and history."""
        order_id = str(entity.id)
        entity.delete()
        logger.info("order.deleted", order_id=order_id)

    # ------------------------------------------------------------------
    # Children
    # ------------------------------------------------------------------

    @transaction.atomic
    def add_item(
        self,
        order: Order,
        product: Product,
        quantity: int,
        unit_price: Decimal,
    ) -> OrderItem:
        item = OrderItem(
            order=order,
            product=product,
            position=order.next_item_position(),
            quantity=quantity,
            unit_price=unit_price,
        )
        item.save()
        logger.info(
            "order.item_persisted",
            order_id=str(order.id),
            item_id=str(item.id),
            position=item.position,
        )
        return item

    @transaction.atomic
    def add_history(
        self,
        order: Order,
        new_status: str,
        old_status: Optional[str] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory(
            order=order,
            old_status=old_status,
            new_status=new_status,
            notes=notes,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order.id),
            old_status=old_status,
            new_status=new_status,
        )
        return history

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_all(self) -> List[Order]:
        return list(_orders())

    def list_by_customer(self, customer_id: int) -> List[Order]:
        return list(_orders().filter(customer_id=customer_id))

    def list_by_customer_with_items(self, customer_id: int) -> List[Order]:
        """Orders of a customer with items (and their products) prefetched."""
        return list(
            _orders()
            .filter(customer_id=customer_id)
            .prefetch_related("items__product")
        )

    def list_by_restaurant(self, restaurant_id: int) -> List[Order]:
        return list(_orders().filter(restaurant_id=restaurant_id))

    def list_by_status(self, status: str) -> List[Order]:
        return list(_orders().filter(status=status))

    def list_by_date_range(self, start: datetime, end: datetime) -> List[Order]:
        return list(_orders().filter(placed_at__range=(start, end)))

    def list_by_status_and_date_range(
        self, status: str, start: datetime, end: datetime
    ) -> List[Order]:
        return list(
            _orders().filter(status=status, placed_at__range=(start, end))
        )

    def list_placed_from(self, start: datetime) -> List[Order]:
        return list(_orders().filter(placed_at__gte=start))

    def list_placed_until(self, end: datetime) -> List[Order]:
        return list(_orders().filter(placed_at__lte=end))


def _orders() -> QuerySet[Order]:
    return Order.objects.all()
