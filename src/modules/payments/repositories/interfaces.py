"""Payment repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.payments.models import Payment


class IPaymentRepository(IRepository["Payment"]):
    """Repository contract for the Payment aggregate root."""

    @abstractmethod
    def get_by_reference(self, reference_number: str) -> Optional[Payment]:
        """Retrieve a payment by its ``PAY-`` business key."""

    @abstractmethod
    def list_for_invoice(self, invoice_id: int) -> List[Payment]:
        """Payments of one invoice, oldest first."""
