"""Billing domain exceptions.

``modules.core.exception_handler`` maps the base classes to HTTP codes.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidRequest, NotFound


class InvoiceNotFound(NotFound):
    """The requested invoice does not exist or has been soft-deleted."""

    code = "invoice_not_found"


class InvoiceAlreadyExists(InvalidRequest):
    """The order already has an invoice."""

    code = "invoice_already_exists"


class OrderNotInvoiceable(InvalidRequest):
    """The order has not been confirmed yet, or it was cancelled / refunded."""

    code = "order_not_invoiceable"


class InvalidInvoiceTransition(InvalidRequest):
    """The invoice status table does not allow the requested move."""

    code = "invalid_invoice_transition"

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition invoice from {from_status} to {to_status}.")
