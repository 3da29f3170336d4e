"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Customer]:
        """Retrieve a live customer by primary key.

        Returns ``None`` for non-existent, soft-deleted or malformed IDs.
        """
        try:
            return Customer.objects.alive().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_for_update(self, id: int) -> Optional[Customer]:
        try:
            return Customer.objects.alive().select_for_update().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        """List live customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"segment": "VIP"}
        """
        queryset = Customer.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        is_new = entity._state.adding
        entity.save()
        logger.info(
            "customer.saved",
            customer_id=entity.id,
            customer_code=entity.customer_code,
            is_new=is_new,
        )
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.soft_deleted", customer_id=id)
        return True

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.alive().filter(email=email.strip().lower()).first()

    def get_by_code(self, code: str) -> Optional[Customer]:
        return Customer.objects.alive().filter(customer_code=code).first()

    def exists_by_email(self, email: str) -> bool:
        return Customer.objects.filter(email=email.strip().lower()).exists()
