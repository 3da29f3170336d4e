"""Payment DTOs for the Service Layer (Pydantic v2, immutable).

``amount`` is unconstrained here: its bounds depend on the
invoice balance and are checked by ``PaymentService``.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from modules.payments.constants import PaymentMethod, PaymentStatus


class ProcessPaymentDTO(BaseModel):
    """Immutable DTO for a payment captured against an invoice."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal
    method: PaymentMethod


class UpdatePaymentStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: PaymentStatus
