"""Concurrency integration tests.

Proves that row locking serializes writers competing for one row:

- 10 threads reserve 1 unit each of a product with 5 available: exactly
  5 orders are created and ``reserved_quantity`` never exceeds the
  on-hand quantity.
- 6 threads pay 10.00 each against an invoice of 35.40: exactly 3
  payments complete and the invoice is never overpaid.

Uses ``TransactionTestCase`` so each thread sees committed data through
its own connection.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import pytest
from django.db import connections
from django.test import TransactionTestCase

from modules.billing.models import Invoice
from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.services import BillingService
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments.constants import PaymentMethod
from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.exceptions import InvalidPaymentAmount
from modules.payments.models import Payment
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentService
from modules.products.exceptions import InsufficientProductStock
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

pytestmark = pytest.mark.integration

INITIAL_STOCK = 5
ORDER_WORKERS = 10
PAYMENT_WORKERS = 6


def _order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def _race(func, workers):
    """Run ``func(i)`` on ``workers`` threads and collect the results."""

    def _run(i):
        try:
            return func(i)
        finally:
            connections.close_all()

    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_run, range(workers)))


class TestStockReservationConcurrency(TransactionTestCase):
    def setUp(self):
        self.customer = Customer.objects.create(
            email="race@example.com", first_name="Race", last_name="Buyer"
        )
        self.product = Product.objects.create(
            sku="GAMER-PC",
            name="Gamer PC",
            price=Decimal("2999.99"),
            quantity_in_stock=INITIAL_STOCK,
        )

    def _reserve_one(self, thread_id: int) -> str:
        dto = CreateOrderDTO(
            customer_id=self.customer.id,
            items=[CreateOrderItemDTO(product_id=self.product.id, quantity=1)],
            notes=f"Concurrency thread {thread_id}",
        )
        try:
            _order_service().create_order(dto)
        except InsufficientProductStock:
            return "insufficient"
        return "success"

    def test_concurrent_orders_exhaust_available_stock(self):
        results = _race(self._reserve_one, ORDER_WORKERS)

        self.assertEqual(results.count("success"), INITIAL_STOCK)
        self.assertEqual(results.count("insufficient"), ORDER_WORKERS - INITIAL_STOCK)

        self.product.refresh_from_db()
        self.assertEqual(self.product.reserved_quantity, INITIAL_STOCK)
        self.assertEqual(self.product.quantity_in_stock, INITIAL_STOCK)
        self.assertEqual(self.product.available_stock, 0)
        self.assertEqual(Order.objects.count(), INITIAL_STOCK)

    def test_reserved_never_exceeds_on_hand(self):
        results = _race(self._reserve_one, ORDER_WORKERS)

        self.product.refresh_from_db()
        self.assertLessEqual(self.product.reserved_quantity, self.product.quantity_in_stock)
        self.assertEqual(self.product.reserved_quantity, results.count("success"))


class TestPaymentConcurrency(TransactionTestCase):
    def setUp(self):
        customer = Customer.objects.create(
            email="payer@example.com", first_name="Race", last_name="Payer"
        )
        product = Product.objects.create(
            sku="SKU-001", name="Widget", price=Decimal("10.00"), quantity_in_stock=100
        )
        orders = _order_service()
        order = orders.create_order(
            CreateOrderDTO(
                customer_id=customer.id,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=3)],
            )
        )
        orders.update_status(order.id, "CONFIRMED")
        billing = BillingService(
            invoice_repository=InvoiceDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )
        self.invoice = billing.generate_for_order(order.id)

    def _pay_ten(self, thread_id: int) -> str:
        service = PaymentService(
            payment_repository=PaymentDjangoRepository(),
            invoice_repository=InvoiceDjangoRepository(),
        )
        try:
            service.process(
                self.invoice.id,
                ProcessPaymentDTO(amount=Decimal("10.00"), method=PaymentMethod.PIX),
            )
        except InvalidPaymentAmount:
            return "rejected"
        return "success"

    def test_concurrent_payments_never_overpay(self):
        self.assertEqual(self.invoice.total_amount, Decimal("35.40"))

        results = _race(self._pay_ten, PAYMENT_WORKERS)

        self.assertEqual(results.count("success"), 3)
        self.assertEqual(results.count("rejected"), PAYMENT_WORKERS - 3)

        invoice = Invoice.objects.get(pk=self.invoice.pk)
        self.assertEqual(invoice.paid_amount, Decimal("30.00"))
        self.assertLessEqual(invoice.paid_amount, invoice.total_amount)
        self.assertEqual(Payment.objects.filter(invoice=invoice).count(), 3)
