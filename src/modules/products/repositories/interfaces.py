"""Product repository interface.

Extends ``IRepository[Product]`` with SKU look-ups, row locking for
stock movements and the low-stock query.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Optional[Product]:
        """Retrieve a live product by SKU."""

    @abstractmethod
    def exists_by_sku(self, sku: str) -> bool:
        """Return ``True`` if any product (even soft-deleted) owns ``sku``."""

    @abstractmethod
    def lock_many(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Lock products (soft-deleted included) by ID in ascending primary-key order.

        Ascending order keeps concurrent multi-product orders deadlock-free.
        Missing IDs are simply absent from the result.
        """

    @abstractmethod
    def save_stock(self, entity: Product) -> Product:
        """Persist only the stock counters of an already-locked product."""

    @abstractmethod
    def list_low_stock(self) -> List[Product]:
        """Live, active products whose available stock is at or below the minimum."""
