"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates (never stock counters).
- ``AdjustStockDTO``: input for a manual stock correction.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests."""

    model_config = ConfigDict(frozen=True)

    sku: str
    name: str
    price: Decimal = Field(gt=0)
    description: str = ""
    cost_price: Decimal | None = Field(default=None, ge=0)
    quantity_in_stock: int = Field(default=0, ge=0)
    min_stock_level: int | None = Field(default=None, ge=0)

    @field_validator("sku")
    @classmethod
    def sku_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("SKU must not be empty.")
        return v.strip().upper()


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional: only supplied fields will be updated.
    Stock counters change only through ``AdjustStockDTO`` and orders.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    price: Decimal | None = Field(default=None, gt=0)
    description: str | None = None
    cost_price: Decimal | None = Field(default=None, ge=0)
    min_stock_level: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class AdjustStockDTO(BaseModel):
    """Immutable DTO for manual stock corrections (``delta`` may be negative)."""

    model_config = ConfigDict(frozen=True)

    delta: int
    reason: str = ""

    @field_validator("delta")
    @classmethod
    def delta_must_not_be_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Stock adjustment must not be zero.")
        return v
