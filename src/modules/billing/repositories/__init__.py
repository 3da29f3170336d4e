"""Invoice repositories package."""

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.repositories.interfaces import IInvoiceRepository

__all__ = ["IInvoiceRepository", "InvoiceDjangoRepository"]
