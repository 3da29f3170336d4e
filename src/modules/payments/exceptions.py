"""Payment domain exceptions.

``modules.core.exception_handler`` maps the base classes to HTTP codes.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidRequest, NotFound


class PaymentNotFound(NotFound):
    """The requested payment does not exist or has been soft-deleted."""

    code = "payment_not_found"


class InvalidPaymentAmount(InvalidRequest):
    """The amount is not positive or exceeds the invoice balance."""

    code = "invalid_payment_amount"


class InvoiceNotPayable(InvalidRequest):
    """The invoice was cancelled."""

    code = "invoice_not_payable"


class InvalidPaymentTransition(InvalidRequest):
    """The payment status table does not allow the requested move."""

    code = "invalid_payment_transition"

    def __init__(self, from_status: str, to_status: str) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(f"Cannot transition payment from {from_status} to {to_status}.")
