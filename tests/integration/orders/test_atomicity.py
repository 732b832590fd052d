"""Integration tests for all-or-nothing order mutations.

A failure after the item row is written must leave neither the item nor
a changed total behind.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError

from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.integration


class TestOrderAtomicity:
    def test_add_item_rolls_back_when_total_save_fails(self, service, product_a):
        order = service.create_order(customer_id=5)

        with patch.object(
            OrderDjangoRepository, "save", side_effect=DatabaseError("disk full")
        ):
            with pytest.raises(DatabaseError):
                service.add_item(order.id, product_a.id, 2)

        assert not OrderItem.objects.filter(order_id=order.id).exists()
        assert Order.objects.get(id=order.id).total_amount == Decimal("0.00")

    def test_cancel_rolls_back_when_history_fails(self, service):
        order = service.create_order(customer_id=5)

        with patch.object(
            OrderDjangoRepository, "add_history", side_effect=DatabaseError("boom")
        ):
            with pytest.raises(DatabaseError):
                service.cancel(order.id)

        assert Order.objects.get(id=order.id).status == "CREATED"
        assert OrderStatusHistory.objects.filter(order_id=order.id).count() == 1

    def test_create_order_rolls_back_when_history_fails(self, service):
        with patch.object(
            OrderDjangoRepository, "add_history", side_effect=DatabaseError("boom")
        ):
            with pytest.raises(DatabaseError):
                service.create_order(customer_id=5)

        assert Order.objects.count() == 0
