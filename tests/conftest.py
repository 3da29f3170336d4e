from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.services import BillingService
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

User = get_user_model()


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = User.objects.create_user(username="apiuser", password="testpass123")
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_customer():
    def _make(email="buyer@example.com", **kwargs):
        defaults = {"first_name": "Maria", "last_name": "Silva", "is_active": True}
        defaults.update(kwargs)
        return Customer.objects.create(email=email, **defaults)

    return _make


@pytest.fixture()
def make_product():
    def _make(sku="SKU-001", price=Decimal("10.00"), quantity_in_stock=100, **kwargs):
        defaults = {"name": f"Product {sku}", "is_active": True}
        defaults.update(kwargs)
        return Product.objects.create(
            sku=sku,
            price=price,
            quantity_in_stock=quantity_in_stock,
            **defaults,
        )

    return _make


@pytest.fixture()
def customer(make_customer):
    return make_customer()


@pytest.fixture()
def product(make_product):
    return make_product()


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


@pytest.fixture()
def billing_service():
    return BillingService(
        invoice_repository=InvoiceDjangoRepository(),
        order_repository=OrderDjangoRepository(),
    )


@pytest.fixture()
def payment_service():
    return PaymentService(
        payment_repository=PaymentDjangoRepository(),
        invoice_repository=InvoiceDjangoRepository(),
    )


@pytest.fixture()
def place_order(order_service, customer, product):
    """Create an order through the service; defaults to 3 x ``product``."""

    def _place(items=None, customer_id=None, **kwargs):
        items = items if items is not None else [(product, 3)]
        dto = CreateOrderDTO(
            customer_id=customer_id or customer.id,
            items=[CreateOrderItemDTO(product_id=p.id, quantity=q) for p, q in items],
            **kwargs,
        )
        return order_service.create_order(dto)

    return _place


@pytest.fixture()
def confirmed_order(place_order, order_service):
    order = place_order()
    return order_service.update_status(order.id, "CONFIRMED")


@pytest.fixture()
def invoice(confirmed_order, billing_service):
    return billing_service.generate_for_order(confirmed_order.id)
