"""Order repository interface (the Order Store).

Extends ``IRepository[Order]`` with the item, history and query methods
the order engine needs.  The Service Layer depends exclusively on this
contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem, OrderStatusHistory
    from modules.products.models import Product


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.
    """

    # ------------------------------------------------------------------
    # Aggregate access
    # ------------------------------------------------------------------

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its items and status history."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row lock until the transaction ends."""

    @abstractmethod
    def add_item(
        self,
        order: Order,
        product: Product,
        quantity: int,
        unit_price: Decimal,
    ) -> OrderItem:
        """Append a line item at the end of the order's item list."""

    @abstractmethod
    def add_history(
        self,
        order: Order,
        new_status: str,
        old_status: Optional[str] = None,
        notes: str = "",
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @abstractmethod
    def list_all(self) -> List[Order]:
        """Every order, newest first."""

    @abstractmethod
    def list_by_customer(self, customer_id: int) -> List[Order]:
        """Orders placed by a customer."""

    @abstractmethod
    def list_by_customer_with_items(self, customer_id: int) -> List[Order]:
        """Orders placed by a customer, items loaded eagerly."""

    @abstractmethod
    def list_by_restaurant(self, restaurant_id: int) -> List[Order]:
        """Orders addressed to a restaurant."""

    @abstractmethod
    def list_by_status(self, status: str) -> List[Order]:
        """Orders currently in ``status``."""

    @abstractmethod
    def list_by_date_range(self, start: datetime, end: datetime) -> List[Order]:
        """Orders placed within ``[start, end]`` (inclusive)."""

    @abstractmethod
    def list_by_status_and_date_range(
        self, status: str, start: datetime, end: datetime
    ) -> List[Order]:
        """Orders in ``status`` placed within ``[start, end]``."""

    @abstractmethod
    def list_placed_from(self, start: datetime) -> List[Order]:
        """Orders placed at or after ``start``."""

    @abstractmethod
    def list_placed_until(self, end: datetime) -> List[Order]:
        """Orders placed at or before ``end``."""
