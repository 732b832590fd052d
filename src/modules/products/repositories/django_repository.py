"""Django ORM implementation of the Product Catalog.

Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising; the order service decides how a missing product is
reported.
"""

from __future__ import annotations

from typing import Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductCatalog

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductCatalog):
    """Concrete Product Catalog backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, entity: Product) -> None:
        product_id = str(entity.id)
        entity.delete()
        logger.info("product.deleted", product_id=product_id)
