"""Unit tests for order status changes.

Covers:
- confirm from every non-terminal status; refusal on terminal orders.
- update_status as an unrestricted override, with history.
- cancel refusals and their messages.
- delete_order removes the order and its children.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    InvalidStatusValue,
    OrderNotFound,
)
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.services import ALREADY_CANCELLED_MESSAGE, DELIVERED_MESSAGE
from shared.domain.exceptions import InvalidState

pytestmark = pytest.mark.unit

NON_TERMINAL = [
    OrderStatus.CREATED,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.OUT_FOR_DELIVERY,
]


@pytest.fixture()
def order(service):
    return service.create_order(customer_id=5)


def _force_status(order, status):
    Order.objects.filter(id=order.id).update(status=status)


class TestConfirm:
    @pytest.mark.parametrize("status", NON_TERMINAL)
    def test_non_terminal_becomes_confirmed(self, service, order, status):
        _force_status(order, status)
        assert service.confirm(order.id).status == OrderStatus.CONFIRMED

    @pytest.mark.parametrize("status", [OrderStatus.DELIVERED, OrderStatus.CANCELLED])
    def test_terminal_is_refused(self, service, order, status):
        _force_status(order, status)
        with pytest.raises(InvalidOrderStatus):
            service.confirm(order.id)
        assert Order.objects.get(id=order.id).status == status

    def test_records_history(self, service, order):
        service.confirm(order.id)
        last = OrderStatusHistory.objects.filter(order=order).last()
        assert last.old_status == OrderStatus.CREATED
        assert last.new_status == OrderStatus.CONFIRMED

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.confirm(uuid4())


class TestUpdateStatus:
    def test_sets_any_status(self, service, order):
        updated = service.update_status(order.id, OrderStatus.OUT_FOR_DELIVERY)
        assert updated.status == OrderStatus.OUT_FOR_DELIVERY

    def test_skips_steps(self, service, order):
        assert service.update_status(order.id, "DELIVERED").status == OrderStatus.DELIVERED

    def test_overrides_terminal_status(self, service, order):
        service.cancel(order.id)
        updated = service.update_status(order.id, OrderStatus.PREPARING)
        assert updated.status == OrderStatus.PREPARING

    def test_accepts_lowercase(self, service, order):
        assert service.update_status(order.id, "preparing").status == OrderStatus.PREPARING

    def test_keeps_prior_status_in_history(self, service, order):
        service.update_status(order.id, OrderStatus.PREPARING, notes="kitchen started")

        last = OrderStatusHistory.objects.filter(order=order).last()
        assert last.old_status == OrderStatus.CREATED
        assert last.new_status == OrderStatus.PREPARING
        assert last.notes == "kitchen started"

    def test_unknown_status_value(self, service, order):
        with pytest.raises(InvalidStatusValue):
            service.update_status(order.id, "LOST")
        assert Order.objects.get(id=order.id).status == OrderStatus.CREATED

    def test_missing_status_value(self, service, order):
        with pytest.raises(InvalidStatusValue):
            service.update_status(order.id, None)
        assert Order.objects.get(id=order.id).status == OrderStatus.CREATED
        assert OrderStatusHistory.objects.filter(order=order).count() == 1

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.update_status(uuid4(), OrderStatus.CONFIRMED)


class TestCancel:
    @pytest.mark.parametrize("status", NON_TERMINAL)
    def test_cancellable_statuses(self, service, order, status):
        _force_status(order, status)
        assert service.cancel(order.id).status == OrderStatus.CANCELLED

    def test_delivered_is_refused_and_unchanged(self, service, order):
        service.update_status(order.id, OrderStatus.DELIVERED)

        with pytest.raises(InvalidOrderStatus) as exc_info:
            service.cancel(order.id)

        assert isinstance(exc_info.value, InvalidState)
        assert exc_info.value.message == DELIVERED_MESSAGE
        assert Order.objects.get(id=order.id).status == OrderStatus.DELIVERED

    def test_second_cancel_is_refused(self, service, order):
        service.cancel(order.id)

        with pytest.raises(InvalidOrderStatus) as exc_info:
            service.cancel(order.id)

        assert exc_info.value.message == ALREADY_CANCELLED_MESSAGE

    def test_records_history_with_notes(self, service, order):
        service.cancel(order.id, notes="customer changed their mind")

        last = OrderStatusHistory.objects.filter(order=order).last()
        assert last.old_status == OrderStatus.CREATED
        assert last.new_status == OrderStatus.CANCELLED
        assert last.notes == "customer changed their mind"

    def test_keeps_items_and_total(self, service, order, product_a):
        service.add_item(order.id, product_a.id, 3)
        cancelled = service.cancel(order.id)
        assert cancelled.total_amount == Decimal("30.00")
        assert cancelled.items.count() == 1

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.cancel(uuid4())


class TestDeleteOrder:
    def test_removes_order_items_and_history(self, service, order, product_a):
        service.add_item(order.id, product_a.id, 1)

        service.delete_order(order.id)

        assert not Order.objects.filter(id=order.id).exists()
        assert not OrderItem.objects.filter(order_id=order.id).exists()
        assert not OrderStatusHistory.objects.filter(order_id=order.id).exists()

    @pytest.mark.parametrize("status", list(OrderStatus))
    def test_any_status_can_be_deleted(self, service, order, status):
        _force_status(order, status)
        service.delete_order(order.id)
        assert not Order.objects.filter(id=order.id).exists()

    def test_product_survives(self, service, order, product_a):
        service.add_item(order.id, product_a.id, 1)
        service.delete_order(order.id)
        product_a.refresh_from_db()
        assert product_a.is_available

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.delete_order(uuid4())

    def test_order_is_gone_for_later_operations(self, service, order):
        service.delete_order(order.id)
        with pytest.raises(OrderNotFound):
            service.get_order(order.id)
