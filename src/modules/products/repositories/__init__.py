"""Product repositories package."""

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductCatalog

__all__ = ["IProductCatalog", "ProductDjangoRepository"]
