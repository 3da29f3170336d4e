"""Billing DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from modules.billing.constants import InvoiceStatus


class UpdateInvoiceStatusDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: InvoiceStatus
