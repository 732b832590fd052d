"""Unit tests for OrderItemRequestDTO."""

from __future__ import annotations

from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from modules.orders.dtos import OrderItemRequestDTO

pytestmark = pytest.mark.unit


class TestOrderItemRequestDTO:
    def test_valid_item(self):
        product_id = uuid4()
        dto = OrderItemRequestDTO(product_id=product_id, quantity=3)
        assert dto.product_id == product_id
        assert dto.quantity == 3

    def test_product_id_parsed_from_string(self):
        dto = OrderItemRequestDTO(
            product_id="0190a0b0-1234-7000-8000-00000000abcd", quantity=1
        )
        assert isinstance(dto.product_id, UUID)

    def test_invalid_product_id_raises(self):
        with pytest.raises(ValidationError):
            OrderItemRequestDTO(product_id="not-a-uuid", quantity=1)

    def test_quantity_range_left_to_service(self):
        assert OrderItemRequestDTO(product_id=uuid4(), quantity=0).quantity == 0

    def test_is_immutable(self):
        dto = OrderItemRequestDTO(product_id=uuid4(), quantity=2)
        with pytest.raises(ValidationError):
            dto.quantity = 5
