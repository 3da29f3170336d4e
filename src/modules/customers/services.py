"""Customer service layer (Use Cases).

Pass-through CRUD for the Customer aggregate, plus the running order
aggregates the order service updates after each placed order.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "company_name",
    "is_active",
)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Create a customer with a generated ``CUST-`` code.

        Raises:
            CustomerAlreadyExists: the email is already registered.
        """
        log = logger.bind(email=dto.email)

        if self._repo.exists_by_email(dto.email):
            log.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        customer = Customer(
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            phone=dto.phone,
            company_name=dto.company_name,
        )
        customer = self._repo.save(customer)
        log.info("customer.created", customer_id=customer.id)
        return customer

    @transaction.atomic
    def update_customer(self, id: int, dto: UpdateCustomerDTO) -> Customer:
        """Update the supplied fields of an existing customer.

        Raises:
            CustomerNotFound: the customer does not exist.
            CustomerAlreadyExists: the new email collides with another customer.
        """
        customer = self._repo.get_for_update(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")

        log = logger.bind(customer_id=id)

        if dto.email is not None and dto.email.lower() != customer.email:
            if self._repo.exists_by_email(dto.email):
                log.warning("customer.duplicate_email")
                raise CustomerAlreadyExists("Email already registered.")

        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        customer = self._repo.save(customer)
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def record_order(self, id: int, amount: Decimal) -> Customer:
        """Add a placed order to the customer's totals and re-derive the segment."""
        customer = self._repo.get_for_update(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        previous_segment = customer.segment
        customer.record_order(amount)
        customer = self._repo.save(customer)
        logger.info(
            "customer.order_recorded",
            customer_id=id,
            total_orders=customer.total_orders,
            total_spent=str(customer.total_spent),
            segment=customer.segment,
            segment_changed=previous_segment != customer.segment,
        )
        return customer

    @transaction.atomic
    def delete_customer(self, id: int) -> None:
        """Soft-delete a customer.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        if not self._repo.delete(id):
            raise CustomerNotFound(f"Customer {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Customer]:
        return self._repo.list(filters)

    def get_customer(self, id: int) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer
