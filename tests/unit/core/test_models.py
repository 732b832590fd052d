"""Unit tests for BaseModel bookkeeping, exercised through Product."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.core.models import BaseModel
from modules.products.models import Product

pytestmark = pytest.mark.unit


def _product(name: str = "Kibe") -> Product:
    return Product.objects.create(name=name, price=Decimal("6.00"))


class TestPrimaryKey:
    def test_inherits_base_model(self):
        assert issubclass(Product, BaseModel)

    def test_id_is_uuid_version_7(self):
        assert _product().id.version == 7

    def test_ids_are_time_ordered(self):
        with freeze_time("2024-03-01 12:00:00"):
            first = _product("first")
        with freeze_time("2024-03-01 12:00:01"):
            second = _product("second")
        assert first.id < second.id

    def test_id_is_not_editable(self):
        assert Product._meta.get_field("id").editable is False

    def test_explicit_id_is_kept(self):
        wanted = uuid.UUID("0190a0b0-1234-7000-8000-00000000abcd")
        product = Product.objects.create(id=wanted, name="Quibe", price=Decimal("1.00"))
        assert product.id == wanted


class TestTimestamps:
    def test_set_on_create(self):
        with freeze_time("2024-05-10 08:00:00"):
            product = _product()
        assert product.created_at == datetime(2024, 5, 10, 8, 0, tzinfo=dt_timezone.utc)
        assert product.updated_at >= product.created_at

    def test_updated_at_moves_on_save(self):
        with freeze_time("2024-05-10 08:00:00") as frozen:
            product = _product()
            created = product.created_at
            frozen.tick(timedelta(minutes=5))
            product.name = "Kibe frito"
            product.save()
        product.refresh_from_db()
        assert product.created_at == created
        assert product.updated_at - created == timedelta(minutes=5)

    def test_update_fields_still_touches_updated_at(self):
        with freeze_time("2024-05-10 08:00:00") as frozen:
            product = _product()
            frozen.tick(timedelta(seconds=30))
            product.is_available = False
            product.save(update_fields=["is_available"])
        product.refresh_from_db()
        assert product.is_available is False
        assert product.updated_at - product.created_at == timedelta(seconds=30)
