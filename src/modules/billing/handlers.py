"""Event handlers for Billing domain events."""

from __future__ import annotations

import structlog

from modules.billing.events import InvoiceGenerated, InvoicePaid, InvoiceStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class InvoiceGeneratedHandler(IEventHandler[InvoiceGenerated]):
    def handle(self, event: InvoiceGenerated) -> None:
        logger.info(
            "invoice.event.generated",
            invoice_id=event.aggregate_id,
            order_id=event.order_id,
            total_amount=event.total_amount,
        )


class InvoiceStatusChangedHandler(IEventHandler[InvoiceStatusChanged]):
    def handle(self, event: InvoiceStatusChanged) -> None:
        logger.info(
            "invoice.event.status_changed",
            invoice_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )


class InvoicePaidHandler(IEventHandler[InvoicePaid]):
    def handle(self, event: InvoicePaid) -> None:
        logger.info(
            "invoice.event.paid",
            invoice_id=event.aggregate_id,
            paid_amount=event.paid_amount,
        )


invoice_generated_handler = InvoiceGeneratedHandler()
invoice_status_changed_handler = InvoiceStatusChangedHandler()
invoice_paid_handler = InvoicePaidHandler()
