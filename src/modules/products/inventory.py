"""Inventory Guard: the only code allowed to move product stock counters.

Invariants held after every call::

    0 <= reserved_quantity <= quantity_in_stock
    available_stock = quantity_in_stock - reserved_quantity >= 0

Callers must pass a product obtained with a row lock
(``IProductRepository.get_for_update``) inside an atomic block.  A failed
movement raises before touching the counters, so the in-memory instance
and the stored row stay identical.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.products.exceptions import InsufficientProductStock, InvalidStockQuantity

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)

STOCK_FIELDS = ["quantity_in_stock", "reserved_quantity"]


def _require_positive(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidStockQuantity(f"Quantity must be a positive integer, got {quantity!r}.")


class InventoryGuard:
    """Reserve / release / commit / adjust stock on a locked Product."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    def reserve(self, product: Product, quantity: int) -> Product:
        """Hold ``quantity`` units for a pending order.

        Raises:
            InsufficientProductStock: ``available_stock < quantity``.
        """
        _require_positive(quantity)
        if product.available_stock < quantity:
            logger.warning(
                "inventory.reserve_rejected",
                product_id=product.id,
                requested=quantity,
                available=product.available_stock,
            )
            raise InsufficientProductStock(product, quantity, product.available_stock)
        product.reserved_quantity += quantity
        return self._persist(product, "inventory.reserved", quantity)

    def release(self, product: Product, quantity: int) -> Product:
        """Drop a reservation; over-release clamps at zero."""
        _require_positive(quantity)
        product.reserved_quantity = max(0, product.reserved_quantity - quantity)
        return self._persist(product, "inventory.released", quantity)

    def commit(self, product: Product, quantity: int) -> Product:
        """Turn a reservation into an actual stock reduction.

        Raises:
            InsufficientProductStock: ``quantity_in_stock < quantity``.
        """
        _require_positive(quantity)
        if product.quantity_in_stock < quantity:
            raise InsufficientProductStock(product, quantity, product.quantity_in_stock)
        product.quantity_in_stock -= quantity
        product.reserved_quantity = max(0, product.reserved_quantity - quantity)
        # A commit without a matching reservation can leave reserved > on-hand.
        product.reserved_quantity = min(product.reserved_quantity, product.quantity_in_stock)
        return self._persist(product, "inventory.committed", quantity)

    def restock(self, product: Product, quantity: int) -> Product:
        """Return committed units to on-hand stock (cancelled confirmed order)."""
        _require_positive(quantity)
        product.quantity_in_stock += quantity
        return self._persist(product, "inventory.restocked", quantity)

    def adjust(self, product: Product, delta: int) -> Product:
        """Manual correction of on-hand stock; ``delta`` may be negative.

        Raises:
            InvalidStockQuantity: ``delta`` is zero or not an integer.
            InsufficientProductStock: the result would be negative, or the
                decrease would eat into reserved units.
        """
        if isinstance(delta, bool) or not isinstance(delta, int) or delta == 0:
            raise InvalidStockQuantity(f"Stock adjustment must be a non-zero integer, got {delta!r}.")
        if product.quantity_in_stock + delta < 0:
            raise InsufficientProductStock(
                product,
                -delta,
                product.quantity_in_stock,
                message=f"Stock for product {product.sku} cannot be negative.",
            )
        if delta < 0 and product.available_stock < -delta:
            raise InsufficientProductStock(product, -delta, product.available_stock)
        product.quantity_in_stock += delta
        return self._persist(product, "inventory.adjusted", delta)

    def _persist(self, product: Product, event: str, quantity: int) -> Product:
        product = self._product_repo.save_stock(product)
        logger.info(
            event,
            product_id=product.id,
            sku=product.sku,
            quantity=quantity,
            quantity_in_stock=product.quantity_in_stock,
            reserved_quantity=product.reserved_quantity,
            low_stock=product.is_low_stock,
        )
        return product
