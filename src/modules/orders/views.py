"""Order API views.

Exposes ``OrderService`` over HTTP using a DRF ViewSet.  Domain
exceptions propagate to ``modules.core.exceptions.api_exception_handler``,
which maps each error kind to its HTTP status; views never swallow them.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import OrderItemRequestDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AddItemSerializer,
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderFilterSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderWithItemsSerializer,
    PriceQuoteResultSerializer,
    PriceQuoteSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    lookup_value_regex = "[0-9a-fA-F-]{32,36}"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            product_catalog=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # Create / Delete
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.create_order(**serializer.validated_data)
        order = self._service.get_order(order.id)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (administrative, unconditional)."""
        self._service.delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?status=&date_from=&date_to=

        Filters are resolved by the order query planner.  Results are
        paginated.
        """
        filters = OrderFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        orders = self._service.list_with_filters(**filters.validated_data)
        return self._paginated(orders, OrderListSerializer)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"customer/(?P<customer_id>\d+)",
    )
    def by_customer(self, request: Request, customer_id: str) -> Response:
        """GET /api/v1/orders/customer/{customer_id}/?include_items=true"""
        include_items = request.query_params.get("include_items", "").lower() in {
            "1",
            "true",
            "yes",
        }
        if include_items:
            orders = self._service.list_by_customer_with_items(int(customer_id))
            return self._paginated(orders, OrderWithItemsSerializer)
        orders = self._service.list_by_customer(int(customer_id))
        return self._paginated(orders, OrderListSerializer)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"restaurant/(?P<restaurant_id>\d+)",
    )
    def by_restaurant(self, request: Request, restaurant_id: str) -> Response:
        """GET /api/v1/orders/restaurant/{restaurant_id}/"""
        orders = self._service.list_by_restaurant(int(restaurant_id))
        return self._paginated(orders, OrderListSerializer)

    # ------------------------------------------------------------------
    # Items and pricing
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def items(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/items/"""
        serializer = AddItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.add_item(
            order_id=pk,
            product_id=serializer.validated_data["product_id"],
            quantity=serializer.validated_data["quantity"],
        )
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def total(self, request: Request) -> Response:
        """POST /api/v1/orders/total/ (pricing preview, nothing is saved)."""
        serializer = PriceQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        requests = [
            OrderItemRequestDTO(**item) for item in serializer.validated_data["items"]
        ]
        total = self._service.calculate_total(requests)
        return Response(PriceQuoteResultSerializer({"total": total}).data)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/confirm/"""
        order = self._service.confirm(pk)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.cancel(pk, notes=serializer.validated_data["notes"])
        return Response(OrderSerializer(order).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Administrative status override: any status may be set, including
        moving an order out of a terminal state.
        """
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self._service.update_status(
            pk,
            new_status=serializer.validated_data["status"],
            notes=serializer.validated_data["notes"],
        )
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _paginated(self, orders, serializer_class) -> Response:
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, self.request, view=self)
        serializer = serializer_class(page, many=True)
        return paginator.get_paginated_response(serializer.data)
