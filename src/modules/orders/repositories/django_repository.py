"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems) is persisted atomically, together
with the outbox rows of the events it raised.

Concurrency control on status updates uses ``select_for_update()``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.core.outbox import store_domain_events
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

ORDER_TOPIC = "orders"


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        Items are inserted in the order given, which is the order they are
        listed back in.
        """
        items = data.get("items", [])
        order = Order(
            customer_id=data["customer_id"],
            subtotal=data["subtotal"],
            tax_amount=data["tax_amount"],
            discount_amount=data["discount_amount"],
            total_amount=data["total_amount"],
            idempotency_key=data.get("idempotency_key"),
            notes=data.get("notes", ""),
        )
        order.save()

        for item_data in items:
            OrderItem(
                order=order,
                product_id=item_data["product_id"],
                product_name=item_data["product_name"],
                product_sku=item_data["product_sku"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
                discount=item_data["discount"],
            ).save()

        logger.info("order.persisted", order_id=order.id, item_count=len(items))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: int) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Uses ``select_related`` for the customer FK (single JOIN) and
        ``prefetch_related`` for items and status history (separate
        batched queries).  Prevents N+1.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.alive()
                .select_related("customer")
                .prefetch_related("items", "status_history")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row itself is locked; items are prefetched so the
        caller can iterate over them while the lock is held.
        """
        try:
            return (
                Order.objects.alive()
                .select_for_update()
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters and eager-loaded relations.

        Examples of valid filters::

            {"status": "PENDING"}
            {"customer_id": 7}
            {"order_date__range": (start, end)}
        """
        queryset = (
            Order.objects.alive()
            .select_related("customer")
            .prefetch_related("items", "status_history")
        )
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_order_number(self, order_number: str) -> Optional[Order]:
        return (
            Order.objects.alive()
            .prefetch_related("items", "status_history")
            .filter(order_number=order_number)
            .first()
        )

    def get_by_idempotency_key(self, key: str) -> Optional[Order]:
        """Retrieve an order by its idempotency key."""
        return (
            Order.objects.select_related("customer")
            .prefetch_related("items", "status_history")
            .filter(idempotency_key=key)
            .first()
        )

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist (create or update) an order and its pending events."""
        entity.save()
        event_count = store_domain_events(entity, ORDER_TOPIC)
        logger.info("order.saved", order_id=entity.id, event_count=event_count)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Soft-delete an order by ID."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.soft_deleted", order_id=id)
        return True

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: int,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory.objects.create(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        logger.info(
            "order.history_added",
            order_id=order_id,
            old_status=old_status,
            new_status=status,
        )
        return history
