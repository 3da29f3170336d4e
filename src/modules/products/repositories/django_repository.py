"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.db import transaction
from django.db.models import F

from modules.products.inventory import STOCK_FIELDS
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a live product by primary key.

        Returns ``None`` for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return Product.objects.alive().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Product]:
        try:
            return Product.objects.alive().select_for_update().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def lock_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Lock products in primary-key order, soft-deleted rows included.

        Orders placed before a product was retired still hold stock on it.
        """
        queryset = (
            Product.objects.select_for_update()
            .filter(id__in=sorted(set(ids)))
            .order_by("id")
        )
        return {product.id: product for product in queryset}

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List live products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"name__icontains": "widget"}
        """
        queryset = Product.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_low_stock(self) -> List[Product]:
        return list(
            Product.objects.alive()
            .filter(is_active=True, min_stock_level__isnull=False)
            .annotate(available=F("quantity_in_stock") - F("reserved_quantity"))
            .filter(available__lte=F("min_stock_level"))
        )

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        entity.save()
        logger.info("product.saved", product_id=entity.id, sku=entity.sku)
        return entity

    def save_stock(self, entity: Product) -> Product:
        entity.save(update_fields=STOCK_FIELDS)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.soft_deleted", product_id=id)
        return True

    def get_by_sku(self, sku: str) -> Optional[Product]:
        return Product.objects.alive().filter(sku=sku.strip().upper()).first()

    def exists_by_sku(self, sku: str) -> bool:
        return Product.objects.filter(sku=sku.strip().upper()).exists()
