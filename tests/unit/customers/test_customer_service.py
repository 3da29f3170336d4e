"""Unit tests for ``CustomerService``."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.customers.constants import CustomerSegment
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.services import CustomerService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return CustomerService(CustomerDjangoRepository())


class TestCreateCustomer:
    def test_creates_with_code_and_lowercase_email(self, service):
        customer = service.create_customer(
            CreateCustomerDTO(first_name="Joao", last_name="Pereira", email="Joao@Example.com")
        )
        assert customer.id is not None
        assert customer.email == "joao@example.com"
        assert customer.customer_code.startswith("CUST-")
        assert customer.is_active is True

    def test_duplicate_email_rejected(self, service, customer):
        with pytest.raises(CustomerAlreadyExists):
            service.create_customer(
                CreateCustomerDTO(first_name="Other", last_name="Person", email=customer.email)
            )
        assert Customer.objects.count() == 1


class TestUpdateCustomer:
    def test_updates_only_given_fields(self, service, customer):
        updated = service.update_customer(customer.id, UpdateCustomerDTO(phone="555-0100"))
        assert updated.phone == "555-0100"
        assert updated.first_name == "Maria"

    def test_can_deactivate(self, service, customer):
        service.update_customer(customer.id, UpdateCustomerDTO(is_active=False))
        customer.refresh_from_db()
        assert customer.is_active is False

    def test_email_collision(self, service, customer, make_customer):
        other = make_customer(email="other@example.com")
        with pytest.raises(CustomerAlreadyExists):
            service.update_customer(other.id, UpdateCustomerDTO(email=customer.email))

    def test_missing_customer(self, service):
        with pytest.raises(CustomerNotFound):
            service.update_customer(999_999, UpdateCustomerDTO(phone="1"))


class TestRecordOrder:
    def test_updates_totals_and_segment(self, service, customer):
        service.record_order(customer.id, Decimal("60000.00"))
        customer.refresh_from_db()
        assert customer.total_orders == 1
        assert customer.total_spent == Decimal("60000.00")
        assert customer.segment == CustomerSegment.PREMIUM


class TestDeleteCustomer:
    def test_soft_delete_hides_customer(self, service, customer):
        service.delete_customer(customer.id)
        with pytest.raises(CustomerNotFound):
            service.get_customer(customer.id)
        assert Customer.objects.filter(id=customer.id).exists()

    def test_delete_missing(self, service):
        with pytest.raises(CustomerNotFound):
            service.delete_customer(999_999)
