"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).  Business
logic lives in the Service Layer; input serializers only check shape
and types.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_id = serializers.IntegerField(min_value=1)
    restaurant_id = serializers.IntegerField(
        min_value=1, required=False, allow_null=True, default=None
    )


class AddItemSerializer(serializers.Serializer):
    """Validates a request to append one line item to an order."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField()


class UpdateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class CancelOrderSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class PriceQuoteSerializer(serializers.Serializer):
    """Validates a pricing preview request; an empty list prices to zero."""

    items = AddItemSerializer(many=True, allow_empty=True)


class OrderFilterSerializer(serializers.Serializer):
    """Query parameters accepted by the order list endpoint."""

    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

    def to_internal_value(self, data):
        if hasattr(data, "get") and data.get("status"):
            data = data.copy()
            data["status"] = data["status"].upper()
        return super().to_internal_value(data)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Read serializer for order items with the price snapshot."""

    product_name = serializers.CharField(source="product.name", read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "position",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "restaurant_id",
            "status",
            "total_amount",
            "placed_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order lists (no nested relations)."""

    class Meta:
        model = Order
        fields = [
            "id",
            "customer_id",
            "restaurant_id",
            "status",
            "total_amount",
            "placed_at",
        ]
        read_only_fields = fields


class OrderWithItemsSerializer(serializers.ModelSerializer):
    """List serializer that includes the (prefetched) items."""

    items = OrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = OrderListSerializer.Meta.fields + ["items"]
        read_only_fields = fields


class PriceQuoteResultSerializer(serializers.Serializer):
    total = serializers.DecimalField(max_digits=12, decimal_places=2)
