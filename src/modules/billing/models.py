"""Invoice model.

Business rules implemented:
- One invoice per order (one-to-one FK, backed by a unique index).
- ``paid_amount`` only grows; ``balance_amount`` is derived.
- An invoice is overdue when it was SENT and its due date has passed.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from django.db import models
from django.utils import timezone

from modules.billing.constants import (
    INVOICE_NUMBER_PREFIX,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    InvoiceStatus,
)
from modules.core.codes import generate_unique_code
from modules.core.models import SoftDeleteModel
from shared.domain.events import DomainEventMixin


class Invoice(DomainEventMixin, SoftDeleteModel):
    """Invoice aggregate root.

    Amounts are copied from the order when the invoice is generated and
    never recomputed afterwards.  ``invoice_number`` (``INV-XXXXXXXX``) is
    generated on first save.
    """

    invoice_number = models.CharField(max_length=20, unique=True, editable=False)
    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="invoice",
    )
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="invoices",
    )
    invoice_date = models.DateField(default=timezone.localdate)
    due_date = models.DateField()
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT,
    )
    subtotal = models.DecimalField(max_digits=15, decimal_places=2)
    tax_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    paid_amount = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    paid_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "invoices"
        ordering = ["-invoice_date", "-id"]
        indexes = [
            models.Index(fields=["status", "due_date"], name="invoices_status_due_idx"),
            models.Index(fields=["customer"], name="invoices_customer_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(paid_amount__gte=0) & models.Q(total_amount__gte=0),
                name="invoices_amounts_non_negative",
            ),
        ]

    @property
    def balance_amount(self) -> Decimal:
        return self.total_amount - (self.paid_amount or Decimal("0.00"))

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def is_overdue(self, today: Optional[date] = None) -> bool:
        """``True`` when the invoice was sent and the due date has passed."""
        today = today or timezone.localdate()
        return self.status == InvoiceStatus.SENT and self.due_date < today

    def mark_as_paid(self) -> None:
        """Settle the invoice in full, whatever its current state."""
        self.status = InvoiceStatus.PAID
        self.paid_amount = self.total_amount
        self.paid_at = timezone.now()

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.invoice_number:
            self.invoice_number = generate_unique_code(
                INVOICE_NUMBER_PREFIX,
                lambda code: Invoice.objects.filter(invoice_number=code).exists(),
            )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.invoice_number} ({self.status})"
