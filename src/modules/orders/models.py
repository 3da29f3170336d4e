"""Order, OrderItem, and OrderStatusHistory models.

Business rules implemented:
- Status transitions are validated against ``VALID_TRANSITIONS``
  (enforced at the service layer through ``can_transition_to``).
- Each status change generates a history record.
- Idempotency via ``idempotency_key`` unique constraint.
- Order number auto-generated as human-readable identifier.
- Customer FK uses PROTECT to preserve financial history.
- OrderItem snapshots product name, SKU and price at creation time.
- OrderItem ``line_total`` is always ``quantity * unit_price - discount``.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from modules.core.codes import generate_unique_code
from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import (
    ORDER_NUMBER_PREFIX,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, SoftDeleteModel):
    """Order aggregate root.

    ``order_number`` (``ORD-XXXXXXXX``) is generated on first save.  The
    numeric ``id`` is used for all internal references and API lookups.

    Money fields hold ``total_amount = subtotal + tax_amount - discount_amount``;
    the order service computes them once, at creation.

    ``idempotency_key`` is nullable: only orders created via the public API
    carry a client-provided key.  Multiple NULLs never collide in a UNIQUE
    column.
    """

    order_number = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    notes = models.TextField(blank=True, default="")
    idempotency_key = models.CharField(
        max_length=255,
        unique=True,
        null=True,
        blank=True,
    )

    class Meta:
        db_table = "orders"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["customer", "status"], name="orders_customer_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(subtotal__gte=0)
                & models.Q(tax_amount__gte=0)
                & models.Q(discount_amount__gte=0)
                & models.Q(total_amount__gte=0),
                name="orders_amounts_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.order_number:
            self.order_number = generate_unique_code(
                ORDER_NUMBER_PREFIX,
                lambda code: Order.objects.filter(order_number=code).exists(),
            )
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.order_number} ({self.status})"


class OrderItem(SoftDeleteModel):
    """Line item linking an Order to a Product.

    ``product_name``, ``product_sku`` and ``unit_price`` are **snapshots**
    taken when the order is placed; later catalog edits never change them.
    ``line_total`` is recalculated on every save.

    If the parent Order is hard-deleted, CASCADE removes items at the
    database level.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="items",
    )
    product = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=200)
    product_sku = models.CharField(max_length=50)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    discount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    line_total = models.DecimalField(max_digits=12, decimal_places=2, editable=False)

    class Meta:
        db_table = "order_items"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="order_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(discount__gte=0),
                name="order_items_discount_non_negative",
            ),
        ]

    @staticmethod
    def compute_line_total(unit_price: Decimal, quantity: int, discount: Decimal) -> Decimal:
        return unit_price * quantity - discount

    def save(self, *args: Any, **kwargs: Any) -> None:
        self.line_total = self.compute_line_total(self.unit_price, self.quantity, self.discount)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.product_sku} x{self.quantity} ({self.line_total})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status transitions.

    Inherits ``BaseModel`` (not ``SoftDeleteModel``) because audit records
    are immutable: they are never edited or soft-deleted.  ``old_status``
    is ``None`` for the creation record.
    """

    order = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=OrderStatus.choices,
        null=True,
        blank=True,
    )
    new_status = models.CharField(max_length=20, choices=OrderStatus.choices)
    notes = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.old_status} -> {self.new_status}"
