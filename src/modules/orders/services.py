"""Order service layer (Use Cases).

Covers the order lifecycle: building orders (create, add items, price
previews), moving them through their statuses, and the read-side
pass-throughs.  All write operations are atomic and lock the order row
first, so concurrent mutations of one order are applied one after the
other while different orders proceed independently.

Business rules enforced:
- Items can only be added to non-terminal orders.
- Quantities must be positive integers.
- Products must exist in the catalog and be available.
- ``unit_price`` is the catalog price at the moment the item is added.
- The order total is recomputed from the full item list on every change.
- Cancellation is refused for DELIVERED and already CANCELLED orders.
- ``update_status`` is an administrative override with no transition table.
- History is recorded on every status change.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.orders.constants import MAX_ORDER_AMOUNT, OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    InvalidQuantity,
    OrderNotFound,
    ProductNotFound,
    ProductUnavailable,
)
from modules.orders.models import Order
from modules.orders.pricing import compute_total, line_subtotal
from modules.orders.queries import OrderQueryPlanner, require_status

if TYPE_CHECKING:
    from modules.orders.dtos import OrderItemRequestDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductCatalog

logger = structlog.get_logger(__name__)

DELIVERED_MESSAGE = "cannot cancel a delivered order"
ALREADY_CANCELLED_MESSAGE = "order already cancelled"


@dataclass(frozen=True)
class _PricedLine:
    product_id: Any
    quantity: int
    unit_price: Decimal


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        product_catalog: IProductCatalog,
        query_planner: Optional[OrderQueryPlanner] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog = product_catalog
        self._planner = query_planner or OrderQueryPlanner(order_repository)

    # ------------------------------------------------------------------
    # Order Builder
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(
        self, customer_id: int, restaurant_id: Optional[int] = None
    ) -> Order:
        """Open a new, empty order in status CREATED.

        The customer is not looked up here; it is validated upstream.
        """
        order = Order(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            status=OrderStatus.CREATED,
        )
        order = self._order_repo.save(order)
        self._order_repo.add_history(
            order, new_status=OrderStatus.CREATED, notes="Order created"
        )
        logger.info(
            "order.created",
            order_id=str(order.id),
            customer_id=customer_id,
            restaurant_id=restaurant_id,
        )
        return order

    @transaction.atomic
    def add_item(self, order_id: UUID, product_id: UUID, quantity: int) -> Order:
        """Append a line item and recompute the order total.

        Raises:
            InvalidQuantity: quantity is not a positive integer, or the
                resulting total would not fit the amount column.
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is DELIVERED or CANCELLED.
            ProductNotFound: product does not exist.
            ProductUnavailable: product is not available.
        """
        _check_quantity(quantity, product_id)
        order = self._lock_order(order_id)

        log = logger.bind(order_id=str(order_id), product_id=str(product_id))

        if order.is_terminal:
            log.warning("order.item_rejected", status=order.status)
            raise InvalidOrderStatus(
                f"Cannot add items to an order in status {order.status}.",
                identifier=order_id,
            )

        product = self._get_available_product(product_id)
        projected = compute_total(order.items.all()) + line_subtotal(
            product.price, quantity
        )
        if projected > MAX_ORDER_AMOUNT:
            log.warning("order.item_rejected", projected_total=str(projected))
            raise InvalidQuantity(
                f"Quantity {quantity} would bring the order total to {projected}, "
                f"above the maximum of {MAX_ORDER_AMOUNT}.",
                identifier=product_id,
            )

        item = self._order_repo.add_item(
            order, product, quantity=quantity, unit_price=product.price
        )

        previous_total = order.total_amount
        order.recalculate_total()
        self._order_repo.save(order)

        log.info(
            "order.item_added",
            item_id=str(item.id),
            quantity=quantity,
            unit_price=str(item.unit_price),
            previous_total=str(previous_total),
            total_amount=str(order.total_amount),
        )
        return self._reload(order_id)

    def calculate_total(
        self, items: Optional[Iterable[OrderItemRequestDTO]]
    ) -> Decimal:
        """Price a candidate list of ``(product_id, quantity)`` lines.

        Read-only.  Uses the current catalog prices.

        Raises:
            InvalidQuantity: a quantity is not a positive integer.
            ProductNotFound: a product does not exist.
            ProductUnavailable: a product is not available.
        """
        requests = list(items or [])
        if not requests:
            logger.info("order.quote_empty")
            return compute_total(None)

        lines = []
        for request in requests:
            _check_quantity(request.quantity, request.product_id)
            product = self._get_available_product(request.product_id)
            lines.append(_PricedLine(product.id, request.quantity, product.price))
            logger.debug(
                "order.quote_line",
                product_id=str(product.id),
                product_name=product.name,
                quantity=request.quantity,
                unit_price=str(product.price),
            )

        total = compute_total(lines)
        logger.info("order.quote_calculated", line_count=len(lines), total=str(total))
        return total

    # ------------------------------------------------------------------
    # Status Machine
    # ------------------------------------------------------------------

    @transaction.atomic
    def confirm(self, order_id: UUID) -> Order:
        """Move a non-terminal order to CONFIRMED.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is DELIVERED or CANCELLED.
        """
        order = self._lock_order(order_id)
        if order.is_terminal:
            logger.warning(
                "order.confirm_not_allowed",
                order_id=str(order_id),
                current_status=order.status,
            )
            raise InvalidOrderStatus(
                f"Cannot confirm an order in status {order.status}.",
                identifier=order_id,
            )
        old_status = self._apply_status(order, OrderStatus.CONFIRMED, "Order confirmed")
        logger.info("order.confirmed", order_id=str(order_id), old_status=old_status)
        return self._reload(order_id)

    @transaction.atomic
    def update_status(self, order_id: UUID, new_status: str, notes: str = "") -> Order:
        """Set any status, bypassing the transition rules.

        This is the administrative override used by back-office tooling;
        the prior status is kept in the order's history.

        Raises:
            InvalidStatusValue: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
        """
        target = require_status(new_status)
        order = self._lock_order(order_id)
        old_status = self._apply_status(order, target, notes)
        logger.info(
            "order.status_updated",
            order_id=str(order_id),
            old_status=old_status,
            new_status=target,
        )
        return self._reload(order_id)

    @transaction.atomic
    def cancel(self, order_id: UUID, notes: str = "") -> Order:
        """Cancel an order that has not been delivered.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: order is DELIVERED or already CANCELLED.
        """
        order = self._lock_order(order_id)
        log = logger.bind(order_id=str(order_id), current_status=order.status)

        if order.status == OrderStatus.DELIVERED:
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(DELIVERED_MESSAGE, identifier=order_id)
        if order.status == OrderStatus.CANCELLED:
            log.warning("order.cancel_not_allowed")
            raise InvalidOrderStatus(ALREADY_CANCELLED_MESSAGE, identifier=order_id)

        self._apply_status(order, OrderStatus.CANCELLED, notes or "Order cancelled")
        log.info("order.cancelled")
        return self._reload(order_id)

    @transaction.atomic
    def delete_order(self, order_id: UUID) -> None:
        """Remove an order permanently, whatever its status.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._lock_order(order_id)
        self._order_repo.delete(order)
        logger.info("order.admin_deleted", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: Any) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.", identifier=order_id)
        return order

    def list_all(self) -> List[Order]:
        return self._order_repo.list_all()

    def list_by_customer(self, customer_id: int) -> List[Order]:
        return self._order_repo.list_by_customer(customer_id)

    def list_by_customer_with_items(self, customer_id: int) -> List[Order]:
        return self._order_repo.list_by_customer_with_items(customer_id)

    def list_by_restaurant(self, restaurant_id: int) -> List[Order]:
        return self._order_repo.list_by_restaurant(restaurant_id)

    def list_by_status(self, status: str) -> List[Order]:
        return self._order_repo.list_by_status(require_status(status))

    def list_by_period(self, start: datetime, end: datetime) -> List[Order]:
        return self._order_repo.list_by_date_range(start, end)

    def list_with_filters(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> List[Order]:
        return self._planner.list_with_filters(status, date_from, date_to)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_order(self, order_id: Any) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.", identifier=order_id)
        return order

    def _reload(self, order_id: Any) -> Order:
        return self._order_repo.get_by_id(str(order_id))

    def _get_available_product(self, product_id: Any) -> Product:
        product = self._catalog.get_by_id(str(product_id))
        if not product:
            raise ProductNotFound(
                f"Product {product_id} not found.", identifier=product_id
            )
        if not product.is_available:
            raise ProductUnavailable(
                f"Product {product_id} is not available.", identifier=product_id
            )
        return product

    def _apply_status(
        self, order: Order, new_status: str, notes: str
    ) -> str:
        old_status = order.status
        order.status = new_status
        self._order_repo.save(order)
        self._order_repo.add_history(
            order, new_status=new_status, old_status=old_status, notes=notes
        )
        return old_status


def _check_quantity(quantity: Any, product_id: Any) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise InvalidQuantity(
            f"Quantity must be a positive integer, got {quantity!r}.",
            identifier=product_id,
        )
