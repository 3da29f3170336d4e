"""Asynchronous tasks of the billing module."""

from __future__ import annotations

from celery import shared_task

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.services import BillingService
from modules.orders.repositories.django_repository import OrderDjangoRepository


@shared_task(name="billing.mark_overdue_invoices")
def mark_overdue_invoices() -> int:
    """Hourly sweep: SENT invoices past their due date become OVERDUE."""
    service = BillingService(
        invoice_repository=InvoiceDjangoRepository(),
        order_repository=OrderDjangoRepository(),
    )
    return service.mark_overdue_invoices()
