"""Order service layer (Use Cases).

Orchestrates the core business logic for order creation,
status management, and cancellation.  All write operations
are atomic: the service defines the unit-of-work boundary.

Business rules enforced:
- Customer must exist and be active; products must exist and be active.
- Stock is reserved at creation, committed on PENDING -> CONFIRMED and
  given back on cancellation, always through ``InventoryGuard``.
- Product rows are locked in primary-key order to avoid deadlocks.
- Status transitions validated against ``VALID_TRANSITIONS``.
- History recorded on every status change.
- Customer order aggregates are updated when the order is placed.
"""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.conf import settings
from django.db import transaction

from modules.core.exceptions import InvalidRequest
from modules.customers.exceptions import CustomerNotFound, InactiveCustomer
from modules.customers.services import CustomerService
from modules.orders.constants import (
    CENTS,
    COMMITTED_STATES,
    NON_CANCELLABLE_STATES,
    OrderStatus,
)
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    InvalidOrderAmount,
    InvalidOrderStatus,
    OrderCannotBeCancelled,
    OrderNotFound,
)
from modules.orders.models import OrderItem
from modules.products.exceptions import InactiveProduct, ProductNotFound
from modules.products.inventory import InventoryGuard

if TYPE_CHECKING:
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def calculate_tax(subtotal: Decimal) -> Decimal:
    """Flat ``ORDER_TAX_RATE`` on the subtotal, rounded half-up to cents."""
    return (subtotal * settings.ORDER_TAX_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        customer_repository: ICustomerRepository,
        product_repository: IProductRepository,
    ) -> None:
        self._order_repo = order_repository
        self._customer_repo = customer_repository
        self._product_repo = product_repository
        self._inventory = InventoryGuard(product_repository)
        self._customers = CustomerService(customer_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create a new order with atomic stock reservation.

        Steps:
        1. Return the existing order when the idempotency key was seen.
        2. Validate the customer exists and is active.
        3. Lock every product (ascending PK), validate it, reserve stock
           and snapshot name / SKU / price for each item in request order.
        4. Compute subtotal, tax and total.
        5. Persist order + items, the ``OrderCreated`` event and history.
        6. Add the order to the customer's running totals.

        Any failure rolls the whole transaction back, including the
        reservations already made for earlier items.

        Raises:
            CustomerNotFound / ProductNotFound: a referenced row is missing.
            InactiveCustomer / InactiveProduct: a referenced row is inactive.
            InvalidRequest: no items, duplicate products or a bad discount.
            InsufficientProductStock: an item cannot be reserved.
        """
        log = logger.bind(customer_id=dto.customer_id)
        log.info("order.creation_started", item_count=len(dto.items))

        # 1. Idempotency check
        if dto.idempotency_key:
            existing = self._order_repo.get_by_idempotency_key(dto.idempotency_key)
            if existing:
                log.info(
                    "order.idempotency_hit",
                    order_id=existing.id,
                    key=dto.idempotency_key,
                )
                return existing

        # 2. Validate customer
        customer = self._customer_repo.get_by_id(dto.customer_id)
        if not customer:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        if not customer.is_active:
            raise InactiveCustomer(f"Customer {dto.customer_id} is inactive.")

        if not dto.items:
            raise InvalidRequest("Order must have at least one item.")
        duplicates = [pid for pid, n in Counter(i.product_id for i in dto.items).items() if n > 1]
        if duplicates:
            raise InvalidRequest(
                f"Duplicate products are not allowed in the same order: {sorted(duplicates)}."
            )

        # 3. Lock products in PK order, then walk items in request order
        products = self._product_repo.lock_many(item.product_id for item in dto.items)
        repo_items = []
        subtotal = Decimal("0.00")

        for item_dto in dto.items:
            product = products.get(item_dto.product_id)
            if product is None or product.is_deleted:
                raise ProductNotFound(f"Product {item_dto.product_id} not found.")
            if not product.is_active:
                raise InactiveProduct(f"Product {product.sku} is inactive.")

            gross = product.price * item_dto.quantity
            if item_dto.discount > gross:
                raise InvalidOrderAmount(
                    f"Discount {item_dto.discount} exceeds line amount {gross} "
                    f"for product {product.sku}."
                )

            self._inventory.reserve(product, item_dto.quantity)

            line_total = OrderItem.compute_line_total(
                product.price, item_dto.quantity, item_dto.discount
            )
            subtotal += line_total
            repo_items.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "product_sku": product.sku,
                    "quantity": item_dto.quantity,
                    "unit_price": product.price,
                    "discount": item_dto.discount,
                }
            )

        # 4. Totals
        tax_amount = calculate_tax(subtotal)
        total_amount = subtotal + tax_amount - dto.discount_amount
        if total_amount < 0:
            raise InvalidOrderAmount(
                f"Order discount {dto.discount_amount} exceeds the order amount "
                f"{subtotal + tax_amount}."
            )

        # 5. Persist order + items + event + history
        order = self._order_repo.create(
            {
                "customer_id": customer.id,
                "items": repo_items,
                "subtotal": subtotal,
                "tax_amount": tax_amount,
                "discount_amount": dto.discount_amount,
                "total_amount": total_amount,
                "notes": dto.notes,
                "idempotency_key": dto.idempotency_key,
            }
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                customer_id=customer.id,
                total_amount=str(total_amount),
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.PENDING,
            notes="Order created",
        )

        # 6. Customer aggregates
        self._customers.record_order(customer.id, total_amount)

        log.info(
            "order.created",
            order_id=order.id,
            order_number=order.order_number,
            total_amount=str(total_amount),
        )
        return self._order_repo.get_by_id(order.id) or order

    @transaction.atomic
    def update_status(self, order_id: int, new_status: str, notes: str = "") -> Order:
        """Transition an order to a new status.

        Acquires a row-level lock on the order before validating the
        transition.  Moving PENDING -> CONFIRMED commits the reserved stock
        of every item.  A move to CANCELLED is handled by ``cancel_order``
        so the stock is always given back.

        Raises:
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        if new_status == OrderStatus.CANCELLED:
            return self.cancel_order(order_id, notes)

        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order.id, current_status=order.status, new_status=new_status)

        if not order.can_transition_to(new_status):
            log.warning("order.invalid_transition")
            raise InvalidOrderStatus(order.status, new_status)

        old_status = order.status
        if old_status == OrderStatus.PENDING and new_status == OrderStatus.CONFIRMED:
            for item, product in self._lock_item_products(order):
                self._inventory.commit(product, item.quantity)

        order.status = new_status
        order.add_domain_event(
            OrderStatusChanged(aggregate_id=order.id, old_status=old_status, new_status=new_status)
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
        )

        log.info("order.status_updated")
        return self._order_repo.get_by_id(order.id)

    @transaction.atomic
    def cancel_order(self, order_id: int, reason: str = "") -> Order:
        """Cancel an order and give its stock back.

        The order row is locked **first** so concurrent cancellations cannot
        return stock twice.  A PENDING order only holds reservations, which
        are released.  A CONFIRMED / PROCESSING order already took the units
        off the shelf; they are restocked instead so no other order's
        reservation is touched.

        Raises:
            OrderNotFound: order does not exist.
            OrderCannotBeCancelled: the order has shipped or been delivered.
            InvalidOrderStatus: the order is already cancelled or refunded.
        """
        # 1. Lock the order row
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")

        log = logger.bind(order_id=order.id, current_status=order.status)

        # 2. Validate
        if order.status in NON_CANCELLABLE_STATES:
            log.warning("order.cancel_not_allowed")
            raise OrderCannotBeCancelled(
                f"Order {order.order_number} cannot be cancelled in status {order.status}."
            )
        if not order.can_transition_to(OrderStatus.CANCELLED):
            log.warning("order.invalid_transition", new_status=OrderStatus.CANCELLED)
            raise InvalidOrderStatus(order.status, OrderStatus.CANCELLED)

        # 3. Give stock back
        old_status = order.status
        for item, product in self._lock_item_products(order):
            if old_status in COMMITTED_STATES:
                self._inventory.restock(product, item.quantity)
            else:
                self._inventory.release(product, item.quantity)

        # 4. Update status on the already-locked row
        order.status = OrderStatus.CANCELLED
        if reason:
            order.notes = reason
        order.add_domain_event(OrderCancelled(aggregate_id=order.id, reason=reason))
        self._order_repo.save(order)

        # 5. Record history
        self._order_repo.add_history(
            order_id=order.id,
            status=OrderStatus.CANCELLED,
            notes=reason or "Order cancelled",
            old_status=old_status,
        )

        log.info("order.cancelled", reason=reason)
        return self._order_repo.get_by_id(order.id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: int) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock_item_products(self, order: Order) -> List[tuple[OrderItem, Product]]:
        items = list(order.items.all())
        products = self._product_repo.lock_many(item.product_id for item in items)
        return [(item, products[item.product_id]) for item in items]
