"""Product Catalog interface.

The order engine only reads from the catalog: it needs a product's
current price, name and availability by id.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductCatalog(IRepository["Product"]):
    """Repository contract for catalog products."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Product]:
        """Return the product, or ``None`` when the id is unknown or malformed."""
