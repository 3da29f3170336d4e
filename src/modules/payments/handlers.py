"""Event handlers for Payments domain events."""

from __future__ import annotations

import structlog

from modules.payments.events import PaymentCompleted, PaymentStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class PaymentCompletedHandler(IEventHandler[PaymentCompleted]):
    def handle(self, event: PaymentCompleted) -> None:
        logger.info(
            "payment.event.completed",
            payment_id=event.aggregate_id,
            invoice_id=event.invoice_id,
            amount=event.amount,
            method=event.method,
            transaction_id=event.transaction_id,
        )


class PaymentStatusChangedHandler(IEventHandler[PaymentStatusChanged]):
    def handle(self, event: PaymentStatusChanged) -> None:
        logger.info(
            "payment.event.status_changed",
            payment_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )


payment_completed_handler = PaymentCompletedHandler()
payment_status_changed_handler = PaymentStatusChangedHandler()
