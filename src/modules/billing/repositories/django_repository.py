"""Django ORM implementation of the Invoice repository.

Satisfies ``IInvoiceRepository`` using Django's QuerySet API.  Missing
rows are reported as ``None`` (Null Object); ``save`` writes the pending
domain events to the outbox in the same transaction.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.billing.constants import InvoiceStatus
from modules.billing.models import Invoice
from modules.billing.repositories.interfaces import IInvoiceRepository
from modules.core.outbox import store_domain_events

logger = structlog.get_logger(__name__)

INVOICE_TOPIC = "billing"


class InvoiceDjangoRepository(IInvoiceRepository):
    """Concrete Invoice repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Invoice]:
        """Retrieve a live invoice by primary key.

        Returns ``None`` for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return Invoice.objects.alive().select_related("order", "customer").filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Invoice]:
        try:
            return Invoice.objects.alive().select_for_update().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Invoice]:
        """List live invoices with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "SENT"}
            {"customer_id": 3}
        """
        queryset = Invoice.objects.alive().select_related("order", "customer")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_overdue(self, today: date, for_update: bool = False) -> List[Invoice]:
        queryset = Invoice.objects.alive().filter(
            status=InvoiceStatus.SENT,
            due_date__lt=today,
        )
        if for_update:
            queryset = queryset.select_for_update()
        return list(queryset.order_by("due_date", "id"))

    @transaction.atomic
    def save(self, entity: Invoice) -> Invoice:
        entity.save()
        event_count = store_domain_events(entity, INVOICE_TOPIC)
        logger.info(
            "invoice.saved",
            invoice_id=entity.id,
            invoice_number=entity.invoice_number,
            status=entity.status,
            event_count=event_count,
        )
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        invoice = self.get_by_id(id)
        if not invoice:
            return False
        invoice.delete()
        logger.info("invoice.soft_deleted", invoice_id=id)
        return True

    def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        return Invoice.objects.alive().filter(invoice_number=invoice_number).first()

    def get_by_order(self, order_id: int) -> Optional[Invoice]:
        try:
            return Invoice.objects.alive().filter(order_id=order_id).first()
        except (TypeError, ValueError):
            return None

    def exists_for_order(self, order_id: int) -> bool:
        return Invoice.objects.filter(order_id=order_id).exists()
