"""Django ORM implementation of the Payment repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.payments.models import Payment
from modules.payments.repositories.interfaces import IPaymentRepository

logger = structlog.get_logger(__name__)

PAYMENT_TOPIC = "payments"


class PaymentDjangoRepository(IPaymentRepository):
    """Concrete Payment repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Payment]:
        """Returns ``None`` for non-existent, soft-deleted or malformed IDs."""
        try:
            return Payment.objects.alive().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Payment]:
        try:
            return Payment.objects.alive().select_for_update().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Payment]:
        queryset = Payment.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_for_invoice(self, invoice_id: int) -> List[Payment]:
        try:
            return list(
                Payment.objects.alive().filter(invoice_id=invoice_id).order_by("created_at", "id")
            )
        except (TypeError, ValueError):
            return []

    @transaction.atomic
    def save(self, entity: Payment) -> Payment:
        entity.save()
        event_count = store_domain_events(entity, PAYMENT_TOPIC)
        logger.info(
            "payment.saved",
            payment_id=entity.id,
            reference_number=entity.reference_number,
            status=entity.status,
            event_count=event_count,
        )
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        payment = self.get_by_id(id)
        if not payment:
            return False
        payment.delete()
        logger.info("payment.soft_deleted", payment_id=id)
        return True

    def get_by_reference(self, reference_number: str) -> Optional[Payment]:
        return Payment.objects.alive().filter(reference_number=reference_number).first()
