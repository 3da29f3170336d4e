"""Customer repository interface.

Extends ``IRepository[Customer]`` with the unique-key look-ups
(email, customer code) the services need.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[Customer]:
        """Retrieve a customer by email address."""

    @abstractmethod
    def get_by_code(self, code: str) -> Optional[Customer]:
        """Retrieve a customer by customer code."""

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` if any customer (even soft-deleted) owns ``email``."""
