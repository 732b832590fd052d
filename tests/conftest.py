from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        product_catalog=ProductDjangoRepository(),
    )


@pytest.fixture()
def product_a():
    return Product.objects.create(
        name="Product A",
        price=Decimal("10.00"),
        is_available=True,
        restaurant_id=1,
    )


@pytest.fixture()
def product_b():
    return Product.objects.create(
        name="Product B",
        price=Decimal("5.50"),
        is_available=True,
        restaurant_id=1,
    )


@pytest.fixture()
def unavailable_product():
    return Product.objects.create(
        name="Sold Out Dessert",
        price=Decimal("12.00"),
        is_available=False,
        restaurant_id=1,
    )
