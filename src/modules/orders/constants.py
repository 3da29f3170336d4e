"""Order domain constants.

Defines status choices and the transition table that drives the order
state machine.  Every status change is validated against
``VALID_TRANSITIONS``; nothing else decides whether a move is legal.
"""

from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    PROCESSING = "PROCESSING", "Processing"
    SHIPPED = "SHIPPED", "Shipped"
    DELIVERED = "DELIVERED", "Delivered"
    CANCELLED = "CANCELLED", "Cancelled"
    REFUNDED = "REFUNDED", "Refunded"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.REFUNDED},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: set(),
    OrderStatus.REFUNDED: set(),
}

TERMINAL_STATES: set[str] = {
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
    OrderStatus.REFUNDED,
}

# Stock for these orders has left the shelf (committed on confirmation).
COMMITTED_STATES: set[str] = {OrderStatus.CONFIRMED, OrderStatus.PROCESSING}

# Once goods are on their way the order can only be refunded.
NON_CANCELLABLE_STATES: set[str] = {OrderStatus.SHIPPED, OrderStatus.DELIVERED}

INVOICEABLE_STATES: set[str] = {
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
}

ORDER_NUMBER_PREFIX = "ORD"

CENTS = Decimal("0.01")
