"""Asynchronous tasks of the core module."""

from __future__ import annotations

import structlog
from celery import shared_task
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.domain.events import DomainEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

OUTBOX_BATCH_SIZE = 100
OUTBOX_MAX_RETRIES = 5


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = OUTBOX_BATCH_SIZE) -> dict:
    """Publish pending outbox rows to the in-process event bus.

    Rows are locked (``SKIP LOCKED`` where supported) so two workers never
    relay the same event.  A failing handler marks only its own row as
    failed; it is retried on the next run until ``OUTBOX_MAX_RETRIES``.
    """
    published = failed = 0
    with transaction.atomic():
        pending = list(
            OutboxEvent.objects.select_for_update(skip_locked=True)
            .filter(
                status__in=[EventStatus.PENDING, EventStatus.FAILED],
                retry_count__lt=OUTBOX_MAX_RETRIES,
            )
            .order_by("created_at", "id")[:batch_size]
        )
        for row in pending:
            try:
                event = DomainEvent.from_payload(row.event_type, row.payload)
                event_bus.publish(event)
            except Exception as exc:
                row.mark_as_failed(str(exc))
                failed += 1
                logger.warning(
                    "outbox.relay_failed",
                    event_id=row.id,
                    event_type=row.event_type,
                    error=str(exc),
                )
                continue
            row.mark_as_published()
            published += 1

    logger.info("outbox.relay_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
