from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.billing.repositories.django_repository import InvoiceDjangoRepository
from modules.billing.services import BillingService
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments.constants import PaymentMethod
from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository

SEED_ORDER_COUNT = 40


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        customers = self._seed_customers()
        products = self._seed_products()
        orders_created = self._seed_orders(customers, products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="user").exists():
            User.objects.create_user("user", password="user123")
            created += 1
        return created

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        seed_customers = [
            ("Ana", "Souza", "ana@example.com", "Souza Comércio"),
            ("Bruno", "Lima", "bruno@example.com", ""),
            ("Carla", "Mendes", "carla@example.com", "Mendes & Filhos"),
            ("Daniel", "Costa", "daniel@example.com", ""),
            ("Eduardo", "Alves", "eduardo@example.com", "Alves Distribuidora"),
            ("Fernanda", "Rocha", "fernanda@example.com", ""),
            ("Gabriel", "Santos", "gabriel@example.com", ""),
            ("Helena", "Ferreira", "helena@example.com", "Ferreira Tech"),
        ]
        for first_name, last_name, email, company in seed_customers:
            customer, _ = Customer.objects.get_or_create(
                email=email,
                defaults={
                    "first_name": first_name,
                    "last_name": last_name,
                    "company_name": company,
                    "is_active": True,
                },
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        catalog = [
            ("ELET-001", 'Monitor 27"', Decimal("1299.90"), Decimal("950.00")),
            ("ELET-002", "Mechanical Keyboard", Decimal("399.90"), Decimal("250.00")),
            ("ELET-003", "Gaming Mouse", Decimal("249.90"), Decimal("140.00")),
            ("ELET-004", 'Notebook 14"', Decimal("3999.00"), Decimal("3100.00")),
            ("MOV-001", "Office Desk", Decimal("899.00"), Decimal("600.00")),
            ("MOV-002", "Ergonomic Chair", Decimal("1499.00"), Decimal("980.00")),
            ("OFF-001", "A4 Paper", Decimal("29.90"), Decimal("18.00")),
            ("OFF-002", "Blue Pen", Decimal("4.90"), Decimal("1.50")),
            ("OFF-003", "Notebook Stand", Decimal("149.90"), Decimal("80.00")),
            ("OFF-004", "Calculator", Decimal("89.90"), Decimal("45.00")),
        ]
        for sku, name, price, cost in catalog:
            product, _ = Product.objects.get_or_create(
                sku=sku,
                defaults={
                    "name": name,
                    "price": price,
                    "cost_price": cost,
                    "quantity_in_stock": random.randint(50, 200),
                    "min_stock_level": 10,
                },
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(self, customers: list[Customer], products: list[Product]) -> int:
        """Place orders through the services so stock, invoices and payments stay consistent."""
        self.stdout.write("Creating orders...")
        if not customers or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0

        order_repo = OrderDjangoRepository()
        invoice_repo = InvoiceDjangoRepository()
        orders = OrderService(order_repo, CustomerDjangoRepository(), ProductDjangoRepository())
        billing = BillingService(invoice_repo, order_repo)
        payments = PaymentService(PaymentDjangoRepository(), invoice_repo)

        outcomes = ["pending", "cancelled", "confirmed", "invoiced", "paid"]
        created = 0
        for i in range(SEED_ORDER_COUNT):
            key = f"seed-order-{i + 1}"
            if order_repo.get_by_idempotency_key(key):
                continue

            picked = random.sample(products, k=random.randint(1, 3))
            order = orders.create_order(
                CreateOrderDTO(
                    customer_id=random.choice(customers).id,
                    items=[
                        CreateOrderItemDTO(product_id=p.id, quantity=random.randint(1, 3))
                        for p in picked
                    ],
                    notes=f"Seed order {i + 1}",
                    idempotency_key=key,
                )
            )
            created += 1

            outcome = random.choice(outcomes)
            if outcome == "pending":
                continue
            if outcome == "cancelled":
                orders.cancel_order(order.id, "Cancelled by seed")
                continue
            orders.update_status(order.id, OrderStatus.CONFIRMED)
            if outcome == "confirmed":
                continue
            invoice = billing.generate_for_order(order.id)
            if outcome == "paid":
                payments.process(
                    invoice.id,
                    ProcessPaymentDTO(
                        amount=invoice.total_amount,
                        method=random.choice(PaymentMethod.values),
                    ),
                )

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return created
