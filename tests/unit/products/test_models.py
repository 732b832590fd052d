"""Unit tests for the Product model and price validation.

Covers:
- Valid creation and defaults.
- Price rules: required, greater than zero, at most 99999.99.
- ``clean()`` and ``save()`` both enforce the price rules.
- __str__ representation.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from modules.products.exceptions import InvalidPrice
from modules.products.models import Product
from modules.products.validators import MAX_PRICE, validate_price
from shared.domain.exceptions import InvalidArgument

pytestmark = pytest.mark.unit


class TestProductCreation:
    def test_create_with_defaults(self):
        product = Product.objects.create(name="Açaí 500ml", price=Decimal("18.90"))
        product.refresh_from_db()
        assert product.description == ""
        assert product.category == ""
        assert product.is_available is True
        assert product.restaurant_id is None
        assert product.price == Decimal("18.90")

    def test_id_is_uuid7(self):
        product = Product.objects.create(name="Brigadeiro", price=Decimal("3.00"))
        assert isinstance(product.id, uuid.UUID)
        assert product.id.version == 7

    def test_str_representation(self):
        product = Product(name="Esfiha", price=Decimal("4.50"))
        assert str(product) == "Esfiha (4.50)"


class TestValidatePrice:
    @pytest.mark.parametrize("value", ["0.01", "42.90", "99999.99", 10, Decimal("1.5")])
    def test_accepts_valid_prices(self, value):
        assert validate_price(value) == Decimal(str(value))

    @pytest.mark.parametrize(
        "value", [None, "0", "0.00", "-1.00", "100000.00", "abc", "NaN", "Infinity"]
    )
    def test_rejects_invalid_prices(self, value):
        with pytest.raises(InvalidPrice) as exc_info:
            validate_price(value)
        assert isinstance(exc_info.value, InvalidArgument)

    def test_ceiling_message(self):
        with pytest.raises(InvalidPrice) as exc_info:
            validate_price(MAX_PRICE + Decimal("0.01"))
        assert str(MAX_PRICE) in exc_info.value.message


class TestProductPriceEnforcement:
    def test_save_rejects_zero_price(self):
        with pytest.raises(InvalidPrice):
            Product.objects.create(name="Freebie", price=Decimal("0.00"))
        assert Product.objects.count() == 0

    def test_save_rejects_missing_price(self):
        with pytest.raises(InvalidPrice):
            Product(name="No price").save()

    def test_clean_rejects_price_above_ceiling(self):
        product = Product(name="Caviar", price=Decimal("100000.00"))
        with pytest.raises(InvalidPrice):
            product.clean()

    def test_price_update_is_validated(self):
        product = Product.objects.create(name="Pão de queijo", price=Decimal("2.00"))
        product.price = Decimal("-2.00")
        with pytest.raises(InvalidPrice):
            product.save()
        product.refresh_from_db()
        assert product.price == Decimal("2.00")
