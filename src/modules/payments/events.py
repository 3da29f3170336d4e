"""Domain events for the Payments bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class PaymentCompleted(DomainEvent):
    """Raised when a payment is captured against an invoice."""

    invoice_id: int = 0
    amount: str = "0.00"
    method: str = ""
    transaction_id: str = ""


@dataclass(frozen=True)
class PaymentStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""
