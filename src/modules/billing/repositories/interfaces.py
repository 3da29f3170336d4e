"""Invoice repository interface.

Extends ``IRepository[Invoice]`` with business-key look-ups and the
overdue query used by the nightly sweep.
"""

from __future__ import annotations

from abc import abstractmethod
from datetime import date
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.billing.models import Invoice


class IInvoiceRepository(IRepository["Invoice"]):
    """Repository contract for the Invoice aggregate root."""

    @abstractmethod
    def get_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        """Retrieve an invoice by its ``INV-`` business key."""

    @abstractmethod
    def get_by_order(self, order_id: int) -> Optional[Invoice]:
        """Retrieve the live invoice of an order."""

    @abstractmethod
    def exists_for_order(self, order_id: int) -> bool:
        """``True`` if any invoice row (soft-deleted included) points at the order."""

    @abstractmethod
    def list_overdue(self, today: date, for_update: bool = False) -> List[Invoice]:
        """SENT invoices whose due date is before ``today``."""
