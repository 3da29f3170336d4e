"""Domain error taxonomy shared by every module.

Services raise these (or a module-specific subclass) at the point of
detection.  They are never retried internally; the DRF exception handler
in ``modules.core.exception_handler`` maps each family to an HTTP status.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule violations."""

    code = "domain_error"


class NotFound(DomainError):
    """A referenced entity does not exist or has been soft-deleted."""

    code = "not_found"


class InvalidRequest(DomainError):
    """Input is malformed or semantically invalid for the current state."""

    code = "invalid_request"


class InsufficientStock(DomainError):
    """A stock movement would break the inventory invariants."""

    code = "insufficient_stock"


class InvalidOrderTransition(DomainError):
    """The order status table does not allow ``from_status -> to_status``."""

    code = "invalid_order_transition"

    def __init__(self, from_status: str, to_status: str, message: str = "") -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            message or f"Cannot transition order from {from_status} to {to_status}."
        )


class OrderProcessingError(DomainError):
    """The order can no longer be processed this way (e.g. cancel after shipment)."""

    code = "order_processing"
