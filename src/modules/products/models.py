"""Product model backing the Product Catalog.

Business rules implemented:
- Price is required, greater than zero and at most ``MAX_PRICE``.
- ``is_available = False`` products stay in the catalog but cannot be
  ordered (enforced by the order service).
"""

from __future__ import annotations

import structlog
from django.db import models

from modules.core.models import BaseModel
from modules.products.validators import MAX_PRICE, MIN_PRICE, validate_price

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Catalog entry for something a restaurant sells.

    ``restaurant_id`` references the seller in the restaurant service;
    this module does not own restaurants.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100, blank=True, default="")
    price = models.DecimalField(max_digits=10, decimal_places=2)
    is_available = models.BooleanField(default=True)
    restaurant_id = models.PositiveBigIntegerField(null=True, blank=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["restaurant_id"], name="products_restaurant_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=MIN_PRICE, price__lte=MAX_PRICE),
                name="products_price_in_range",
            ),
        ]

    def clean(self) -> None:
        super().clean()
        validate_price(self.price)

    def save(self, *args, **kwargs) -> None:
        validate_price(self.price)
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                price=str(self.price),
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.price})"
