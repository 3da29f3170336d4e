"""Domain events for the Billing bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class InvoiceGenerated(DomainEvent):
    """Raised when an invoice is generated for an order."""

    order_id: int = 0
    total_amount: str = "0.00"


@dataclass(frozen=True)
class InvoiceStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class InvoicePaid(DomainEvent):
    """Raised when an invoice is settled in full."""

    paid_amount: str = "0.00"
