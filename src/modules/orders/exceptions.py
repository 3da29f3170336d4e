"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
``modules.core.exception_handler`` translates them into HTTP responses.
"""

from __future__ import annotations

from modules.core.exceptions import (
    InvalidOrderTransition,
    InvalidRequest,
    NotFound,
    OrderProcessingError,
)


class OrderNotFound(NotFound):
    """The requested order does not exist or has been soft-deleted."""

    code = "order_not_found"


class InvalidOrderStatus(InvalidOrderTransition):
    """The requested status move is not in the transition table."""


class OrderCannotBeCancelled(OrderProcessingError):
    """The order has already shipped or been delivered."""

    code = "order_not_cancellable"


class InvalidOrderAmount(InvalidRequest):
    """A discount exceeds the amount it is applied to."""

    code = "invalid_order_amount"
