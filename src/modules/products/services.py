"""Product service layer (Use Cases).

Pass-through CRUD for the Product aggregate plus manual stock
corrections, which go through ``InventoryGuard`` like every other
stock movement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductAlreadyExists, ProductNotFound
from modules.products.inventory import InventoryGuard
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import AdjustStockDTO, CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "price",
    "description",
    "cost_price",
    "min_stock_level",
    "is_active",
)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository
        self._inventory = InventoryGuard(repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing SKU uniqueness.

        Raises:
            ProductAlreadyExists: the SKU is already taken.
        """
        log = logger.bind(sku=dto.sku)

        if self._repo.exists_by_sku(dto.sku):
            log.warning("product.duplicate_sku")
            raise ProductAlreadyExists(f"SKU '{dto.sku}' already registered.")

        product = Product(
            sku=dto.sku,
            name=dto.name,
            price=dto.price,
            description=dto.description,
            cost_price=dto.cost_price,
            quantity_in_stock=dto.quantity_in_stock,
            min_stock_level=dto.min_stock_level,
        )
        product = self._repo.save(product)
        log.info("product.created", product_id=product.id)
        return product

    @transaction.atomic
    def update_product(self, id: int, dto: UpdateProductDTO) -> Product:
        """Update catalog fields of an existing product.

        Raises:
            ProductNotFound: the product does not exist.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        logger.info("product.updated", product_id=id)
        return product

    @transaction.atomic
    def adjust_stock(self, id: int, dto: AdjustStockDTO) -> Product:
        """Apply a manual on-hand correction under a row lock.

        Raises:
            ProductNotFound: the product does not exist.
            InsufficientProductStock: the correction would break the invariants.
        """
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        product = self._inventory.adjust(product, dto.delta)
        logger.info("product.stock_adjusted", product_id=id, delta=dto.delta, reason=dto.reason)
        return product

    @transaction.atomic
    def delete_product(self, id: int) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: the product does not exist.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        return self._repo.list(filters)

    def list_low_stock(self) -> List[Product]:
        return self._repo.list_low_stock()

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def get_product_by_sku(self, sku: str) -> Product:
        product = self._repo.get_by_sku(sku)
        if not product:
            raise ProductNotFound(f"Product with SKU '{sku}' not found.")
        return product
