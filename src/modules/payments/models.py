"""Payment model.

A payment is captured against one invoice.  ``transaction_id`` and
``payment_date`` are only set once the payment completes.
"""

from __future__ import annotations

from typing import Any

from django.db import models
from django.utils import timezone

from modules.core.codes import generate_unique_code
from modules.core.models import SoftDeleteModel
from modules.payments.constants import (
    PAYMENT_REFERENCE_PREFIX,
    VALID_TRANSITIONS,
    PaymentMethod,
    PaymentStatus,
)
from shared.domain.events import DomainEventMixin


class Payment(DomainEventMixin, SoftDeleteModel):
    """Payment aggregate root (``PAY-XXXXXXXX`` reference, generated on first save)."""

    reference_number = models.CharField(max_length=20, unique=True, editable=False)
    invoice = models.ForeignKey(
        "billing.Invoice",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    method = models.CharField(max_length=30, choices=PaymentMethod.choices)
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_date = models.DateTimeField(null=True, blank=True, default=None)
    transaction_id = models.CharField(  # noqa: DJ01
        max_length=50,
        null=True,
        blank=True,
        default=None,
    )

    class Meta:
        db_table = "payments"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["invoice", "status"], name="payments_invoice_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payments_amount_positive",
            ),
        ]

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def mark_as_completed(self, transaction_id: str) -> None:
        self.status = PaymentStatus.COMPLETED
        self.transaction_id = transaction_id
        self.payment_date = timezone.now()

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.reference_number:
            self.reference_number = generate_unique_code(
                PAYMENT_REFERENCE_PREFIX,
                lambda code: Payment.objects.filter(reference_number=code).exists(),
            )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.reference_number} {self.amount} ({self.status})"
