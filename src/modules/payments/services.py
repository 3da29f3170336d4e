"""Payment service layer (Use Cases).

Captures payments against an invoice's outstanding balance.  Payment
and invoice are written in one transaction while the invoice row is
locked, so concurrent payments can never overshoot the total.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.billing.constants import InvoiceStatus
from modules.billing.events import InvoicePaid
from modules.billing.exceptions import InvoiceNotFound
from modules.core.codes import transaction_id
from modules.orders.constants import CENTS
from modules.payments.constants import PaymentStatus
from modules.payments.events import PaymentCompleted, PaymentStatusChanged
from modules.payments.exceptions import (
    InvalidPaymentAmount,
    InvalidPaymentTransition,
    InvoiceNotPayable,
    PaymentNotFound,
)
from modules.payments.models import Payment

if TYPE_CHECKING:
    from modules.billing.repositories.interfaces import IInvoiceRepository
    from modules.payments.dtos import ProcessPaymentDTO
    from modules.payments.repositories.interfaces import IPaymentRepository

logger = structlog.get_logger(__name__)


class PaymentService:
    """Application service for Payment use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        payment_repository: IPaymentRepository,
        invoice_repository: IInvoiceRepository,
    ) -> None:
        self._payment_repo = payment_repository
        self._invoice_repo = invoice_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def process(self, invoice_id: int, dto: ProcessPaymentDTO) -> Payment:
        """Capture a payment and apply it to the invoice balance.

        The payment is created PROCESSING and completed synchronously with
        a generated transaction id.  When the invoice's paid amount reaches
        its total, the invoice is marked PAID.

        Raises:
            InvoiceNotFound: the invoice does not exist.
            InvoiceNotPayable: the invoice was cancelled.
            InvalidPaymentAmount: amount is not positive, exceeds the balance
                or has fractions of a cent.
        """
        invoice = self._invoice_repo.get_for_update(invoice_id)
        if not invoice:
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")

        log = logger.bind(
            invoice_id=invoice.id,
            amount=str(dto.amount),
            method=dto.method,
            balance=str(invoice.balance_amount),
        )

        if invoice.status == InvoiceStatus.CANCELLED:
            log.warning("payment.invoice_cancelled")
            raise InvoiceNotPayable(f"Invoice {invoice.invoice_number} is cancelled.")
        if dto.amount <= 0:
            raise InvalidPaymentAmount("Payment amount must be greater than zero.")
        if dto.amount > invoice.balance_amount:
            log.warning("payment.exceeds_balance")
            raise InvalidPaymentAmount("Payment amount exceeds invoice balance.")
        if dto.amount != dto.amount.quantize(CENTS):
            raise InvalidPaymentAmount("Payment amount must be a whole number of cents.")

        payment = Payment(
            invoice_id=invoice.id,
            method=dto.method,
            amount=dto.amount,
            status=PaymentStatus.PROCESSING,
        )
        payment = self._payment_repo.save(payment)

        payment.mark_as_completed(transaction_id())
        payment.add_domain_event(
            PaymentCompleted(
                aggregate_id=payment.id,
                invoice_id=invoice.id,
                amount=str(payment.amount),
                method=payment.method,
                transaction_id=payment.transaction_id,
            )
        )
        payment = self._payment_repo.save(payment)

        invoice.paid_amount += dto.amount
        if invoice.paid_amount >= invoice.total_amount:
            invoice.mark_as_paid()
            invoice.add_domain_event(
                InvoicePaid(aggregate_id=invoice.id, paid_amount=str(invoice.paid_amount))
            )
        self._invoice_repo.save(invoice)

        log.info(
            "payment.completed",
            payment_id=payment.id,
            reference_number=payment.reference_number,
            transaction_id=payment.transaction_id,
            invoice_status=invoice.status,
            paid_amount=str(invoice.paid_amount),
        )
        return payment

    @transaction.atomic
    def update_status(self, payment_id: int, new_status: str) -> Payment:
        """Move a payment along its transition table.

        Completing a payment stamps a transaction id and payment date.

        Raises:
            PaymentNotFound: the payment does not exist.
            InvalidPaymentTransition: the move is not in the table.
        """
        payment = self._payment_repo.get_for_update(payment_id)
        if not payment:
            raise PaymentNotFound(f"Payment {payment_id} not found.")

        log = logger.bind(payment_id=payment.id, current_status=payment.status, new_status=new_status)

        if not payment.can_transition_to(new_status):
            log.warning("payment.invalid_transition")
            raise InvalidPaymentTransition(payment.status, new_status)

        old_status = payment.status
        if new_status == PaymentStatus.COMPLETED:
            payment.mark_as_completed(payment.transaction_id or transaction_id())
        else:
            payment.status = new_status
        payment.add_domain_event(
            PaymentStatusChanged(aggregate_id=payment.id, old_status=old_status, new_status=new_status)
        )
        payment = self._payment_repo.save(payment)
        log.info("payment.status_updated")
        return payment

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_payment(self, payment_id: int) -> Payment:
        """Retrieve a single payment by ID.

        Raises:
            PaymentNotFound: the payment does not exist.
        """
        payment = self._payment_repo.get_by_id(payment_id)
        if not payment:
            raise PaymentNotFound(f"Payment {payment_id} not found.")
        return payment

    def get_payment_by_reference(self, reference_number: str) -> Payment:
        payment = self._payment_repo.get_by_reference(reference_number)
        if not payment:
            raise PaymentNotFound(f"Payment {reference_number} not found.")
        return payment

    def list_payments(self, filters: Optional[Dict[str, Any]] = None) -> List[Payment]:
        return self._payment_repo.list(filters)

    def list_for_invoice(self, invoice_id: int) -> List[Payment]:
        """Payments of an invoice.

        Raises:
            InvoiceNotFound: the invoice does not exist.
        """
        if not self._invoice_repo.get_by_id(invoice_id):
            raise InvoiceNotFound(f"Invoice {invoice_id} not found.")
        return self._payment_repo.list_for_invoice(invoice_id)
