"""Billing service layer (Use Cases).

Derives invoices from orders, drives the invoice state machine and
sweeps overdue invoices.  Every command runs in one transaction with
the invoice (or, for generation, the order) row locked.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.billing.constants import InvoiceStatus
from modules.billing.events import InvoiceGenerated, InvoicePaid, InvoiceStatusChanged
from modules.billing.exceptions import (
    InvalidInvoiceTransition,
    InvoiceAlreadyExists,
    InvoiceNotFound,
    OrderNotInvoiceable,
)
from modules.billing.models import Invoice
from modules.orders.constants import INVOICEABLE_STATES
from modules.orders.exceptions import OrderNotFound

if TYPE_CHECKING:
    from modules.billing.repositories.interfaces import IInvoiceRepository
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class BillingService:
    """Application service for Invoice use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        invoice_repository: IInvoiceRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._invoice_repo = invoice_repository
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def generate_for_order(self, order_id: int) -> Invoice:
        """Create a DRAFT invoice copying the order's amounts.

        The order row is locked so two concurrent requests cannot both pass
        the "already invoiced" check; the one-to-one column backs it up.

        Raises:
            OrderNotFound: the order does not exist.
            InvoiceAlreadyExists: the order already has an invoice.
            OrderNotInvoiceable: the order is PENDING, CANCELLED or REFUNDED.
        """
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order.id, order_status=order.status)

        if self._invoice_repo.exists_for_order(order.id):
            log.warning("invoice.duplicate")
            raise InvoiceAlreadyExists("Invoice already exists for this order.")
        if order.status not in INVOICEABLE_STATES:
            log.warning("invoice.order_not_invoiceable")
            raise OrderNotInvoiceable(
                "Can only generate invoice for confirmed or completed orders."
            )

        invoice_date = timezone.localdate()
        invoice = Invoice(
            order_id=order.id,
            customer_id=order.customer_id,
            invoice_date=invoice_date,
            due_date=invoice_date + timedelta(days=settings.INVOICE_DUE_DAYS),
            status=InvoiceStatus.DRAFT,
            subtotal=order.subtotal,
            tax_amount=order.tax_amount,
            total_amount=order.total_amount,
        )
        invoice = self._invoice_repo.save(invoice)
        invoice.add_domain_event(
            InvoiceGenerated(
                aggregate_id=invoice.id,
                order_id=order.id,
                total_amount=str(invoice.total_amount),
            )
        )
        invoice = self._invoice_repo.save(invoice)

        log.info(
            "invoice.generated",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            total_amount=str(invoice.total_amount),
            due_date=invoice.due_date.isoformat(),
        )
        return invoice

    @transaction.atomic
    def mark_as_paid(self, invoice_id: int) -> Invoice:
        """Settle the invoice in full, regardless of its current status.

        Raises:
            InvoiceNotFound: the invoice does not exist.
        """
        invoice = self._lock(invoice_id)
        old_status = invoice.status
        invoice.mark_as_paid()
        self._record_status_change(invoice, old_status)
        invoice = self._invoice_repo.save(invoice)
        logger.info(
            "invoice.paid",
            invoice_id=invoice.id,
            old_status=old_status,
            paid_amount=str(invoice.paid_amount),
        )
        return invoice

    @transaction.atomic
    def update_status(self, invoice_id: int, new_status: str) -> Invoice:
        """Move the invoice along its transition table.

        A move to PAID settles the invoice exactly like ``mark_as_paid``.

        Raises:
            InvoiceNotFound: the invoice does not exist.
            InvalidInvoiceTransition: the move is not in the table.
        """
        invoice = self._lock(invoice_id)
        log = logger.bind(invoice_id=invoice.id, current_status=invoice.status, new_status=new_status)

        if not invoice.can_transition_to(new_status):
            log.warning("invoice.invalid_transition")
            raise InvalidInvoiceTransition(invoice.status, new_status)

        old_status = invoice.status
        if new_status == InvoiceStatus.PAID:
            invoice.mark_as_paid()
        else:
            invoice.status = new_status
        self._record_status_change(invoice, old_status)
        invoice = self._invoice_repo.save(invoice)
        log.info("invoice.status_updated")
        return invoice

    @transaction.atomic
    def mark_overdue_invoices(self, today: Optional[date] = None) -> int:
        """Flip every overdue SENT invoice to OVERDUE; returns how many moved."""
        today = today or timezone.localdate()
        overdue = self._invoice_repo.list_overdue(today, for_update=True)
        for invoice in overdue:
            invoice.status = InvoiceStatus.OVERDUE
            self._record_status_change(invoice, InvoiceStatus.SENT)
            self._invoice_repo.save(invoice)
        logger.info("invoice.overdue_sweep", today=today.isoformat(), count=len(overdue))
        return len(overdue)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_invoice(self, invoice_id: int) -> Invoice:
        """Retrieve a single invoice by ID.

        Raises:
            InvoiceNotFound: the invoice does not exist.
        """
        invoice = self._invoice_repo.get_by_id(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        return invoice

    def get_invoice_by_number(self, invoice_number: str) -> Invoice:
        invoice = self._invoice_repo.get_by_invoice_number(invoice_number)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_number} not found.")
        return invoice

    def get_invoice_for_order(self, order_id: int) -> Invoice:
        """Retrieve the invoice of an order.

        Raises:
            OrderNotFound: the order does not exist.
            InvoiceNotFound: the order has not been invoiced.
        """
        if not self._order_repo.get_by_id(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")
        invoice = self._invoice_repo.get_by_order(order_id)
        if not invoice:
            raise InvoiceNotFound(f"No invoice for order {order_id}.")
        return invoice

    def list_invoices(self, filters: Optional[Dict[str, Any]] = None) -> List[Invoice]:
        return self._invoice_repo.list(filters)

    def list_overdue(self, today: Optional[date] = None) -> List[Invoice]:
        return self._invoice_repo.list_overdue(today or timezone.localdate())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, invoice_id: int) -> Invoice:
        invoice = self._invoice_repo.get_for_update(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        return invoice

    @staticmethod
    def _record_status_change(invoice: Invoice, old_status: str) -> None:
        if invoice.status != old_status:
            invoice.add_domain_event(
                InvoiceStatusChanged(
                    aggregate_id=invoice.id,
                    old_status=old_status,
                    new_status=invoice.status,
                )
            )
        if invoice.status == InvoiceStatus.PAID:
            invoice.add_domain_event(
                InvoicePaid(aggregate_id=invoice.id, paid_amount=str(invoice.paid_amount))
            )
