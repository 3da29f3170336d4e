"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service layer.
DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items).
- ``UpdateOrderStatusDTO``: input for a status transition.
- ``CancelOrderDTO``: input for a cancellation.

Emptiness of ``items`` and duplicate products are business rules checked
by ``OrderService`` so they surface as ``InvalidRequest``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.orders.constants import OrderStatus


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The client sends ``product_id``, ``quantity`` and an optional line
    ``discount``.  ``unit_price`` is resolved by the Service Layer from the
    product catalog.
    """

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int = Field(ge=1)
    discount: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests."""

    model_config = ConfigDict(frozen=True)

    customer_id: int
    items: List[CreateOrderItemDTO]
    discount_amount: Decimal = Field(default=Decimal("0.00"), ge=0, decimal_places=2)
    notes: str = ""
    idempotency_key: Optional[str] = None


class UpdateOrderStatusDTO(BaseModel):
    """Immutable DTO for status transition requests."""

    model_config = ConfigDict(frozen=True)

    status: OrderStatus
    notes: str = ""


class CancelOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = ""
