"""Customer model with running order aggregates and soft delete.

Business rules implemented:
- Email and customer code are unique in the system.
- Inactive customers cannot place orders (enforced at the order service).
- ``segment`` is recomputed from ``total_spent`` whenever an order is placed.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.db import models

from modules.core.codes import generate_unique_code
from modules.core.models import SoftDeleteModel
from modules.customers.constants import (
    CUSTOMER_CODE_PREFIX,
    CustomerSegment,
    segment_for,
)

logger = structlog.get_logger(__name__)


class Customer(SoftDeleteModel):
    """Customer aggregate root.

    ``customer_code`` (``CUST-XXXXXXXX``) is the business key, generated on
    first save.  ``total_orders`` / ``total_spent`` are maintained by the
    order service and must not be edited through the CRUD endpoints.
    """

    customer_code = models.CharField(max_length=20, unique=True, editable=False)
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(max_length=100, unique=True)
    phone = models.CharField(max_length=20, blank=True, default="")
    company_name = models.CharField(max_length=100, blank=True, default="")
    is_active = models.BooleanField(default=True)
    segment = models.CharField(
        max_length=20,
        choices=CustomerSegment.choices,
        default=CustomerSegment.REGULAR,
    )
    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal("0.00"),
    )

    class Meta:
        db_table = "customers"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
            models.Index(fields=["is_active"], name="customers_active_idx"),
            models.Index(fields=["segment"], name="customers_segment_idx"),
        ]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def record_order(self, amount: Decimal) -> None:
        """Add one order of ``amount`` to the running totals and re-segment."""
        self.total_orders += 1
        self.total_spent += amount
        self.segment = segment_for(self.total_spent)

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        if not self.customer_code:
            self.customer_code = generate_unique_code(
                CUSTOMER_CODE_PREFIX,
                lambda code: Customer.objects.filter(customer_code=code).exists(),
            )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.customer_code} - {self.full_name}"
