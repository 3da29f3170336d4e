"""Product and inventory domain exceptions.

Raised by the Service Layer and ``InventoryGuard`` when business rules
are violated.  ``modules.core.exception_handler`` maps the base classes
to HTTP codes.
"""

from __future__ import annotations

from modules.core.exceptions import InsufficientStock, InvalidRequest, NotFound


class ProductAlreadyExists(InvalidRequest):
    """A product with the same SKU already exists."""

    code = "product_already_exists"


class ProductNotFound(NotFound):
    """The requested product does not exist or has been soft-deleted."""

    code = "product_not_found"


class InactiveProduct(InvalidRequest):
    """The product is inactive and cannot be sold."""

    code = "inactive_product"


class InvalidStockQuantity(InvalidRequest):
    """A stock movement was requested with a non-positive quantity."""

    code = "invalid_stock_quantity"


class InsufficientProductStock(InsufficientStock):
    """The stock movement would oversell or drive a counter negative."""

    def __init__(self, product, requested: int, available: int, message: str = "") -> None:
        self.product_id = product.id
        self.sku = product.sku
        self.requested = requested
        self.available = available
        super().__init__(
            message
            or f"Insufficient stock for product {product.sku}: "
            f"requested {requested}, available {available}."
        )
