"""Product model with SKU uniqueness and stock counters.

Business rules implemented:
- SKU is unique in the system (normalised to upper case).
- Inactive products cannot be ordered (enforced at the order service).
- Price must be greater than zero.
- ``0 <= reserved_quantity <= quantity_in_stock`` at all times, enforced by
  ``InventoryGuard`` and backed by database check constraints.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel

logger = structlog.get_logger(__name__)


class Product(SoftDeleteModel):
    """Product aggregate root.

    ``quantity_in_stock`` is on-hand stock; ``reserved_quantity`` is held by
    pending orders.  Only ``InventoryGuard`` may change either counter.
    """

    sku = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    cost_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
    )
    quantity_in_stock = models.PositiveIntegerField(default=0)
    reserved_quantity = models.PositiveIntegerField(default=0)
    min_stock_level = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["is_active"], name="products_active_idx"),
            models.Index(fields=["name"], name="products_name_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(reserved_quantity__lte=models.F("quantity_in_stock")),
                name="products_reserved_within_stock",
            ),
        ]

    # ------------------------------------------------------------------
    # Derived stock figures
    # ------------------------------------------------------------------

    @property
    def available_stock(self) -> int:
        return self.quantity_in_stock - self.reserved_quantity

    @property
    def is_low_stock(self) -> bool:
        return (
            self.min_stock_level is not None
            and self.available_stock <= self.min_stock_level
        )

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.sku:
            self.sku = self.sku.strip().upper()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if self.reserved_quantity > self.quantity_in_stock:
            raise ValidationError(
                {"reserved_quantity": "Reserved quantity cannot exceed stock."}
            )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.sku:
            self.sku = self.sku.strip().upper()
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=self.id,
                sku=self.sku,
                name=self.name,
            )

    def __str__(self) -> str:
        return f"{self.sku} - {self.name}"
