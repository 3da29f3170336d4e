"""Unit tests for ``OrderService.create_order``.

Covers:
- Totals: subtotal, 18% tax rounded half-up, order discount, line discount.
- Snapshots of product name / SKU / price on the items.
- Stock reservation and customer aggregates.
- Validation failures and all-or-nothing rollback.
- Idempotency key replay.
- History and outbox rows written with the order.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.core.exceptions import InsufficientStock, InvalidRequest, NotFound
from modules.core.models import OutboxEvent
from modules.customers.constants import CustomerSegment
from modules.customers.exceptions import CustomerNotFound, InactiveCustomer
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.services import calculate_tax
from modules.products.exceptions import InactiveProduct, ProductNotFound

pytestmark = pytest.mark.unit


class TestTotals:
    def test_three_units_at_ten(self, place_order):
        order = place_order()
        assert order.subtotal == Decimal("30.00")
        assert order.tax_amount == Decimal("5.40")
        assert order.discount_amount == Decimal("0.00")
        assert order.total_amount == Decimal("35.40")

    def test_order_discount_reduces_total(self, place_order):
        order = place_order(discount_amount=Decimal("5.00"))
        assert order.total_amount == Decimal("30.40")

    def test_line_discount_reduces_subtotal(self, order_service, customer, product):
        order = order_service.create_order(
            CreateOrderDTO(
                customer_id=customer.id,
                items=[
                    CreateOrderItemDTO(
                        product_id=product.id, quantity=3, discount=Decimal("10.00")
                    )
                ],
            )
        )
        item = order.items.get()
        assert item.line_total == Decimal("20.00")
        assert order.subtotal == Decimal("20.00")
        assert order.tax_amount == Decimal("3.60")
        assert order.total_amount == Decimal("23.60")

    @pytest.mark.parametrize(
        "subtotal,expected",
        [
            (Decimal("0.25"), Decimal("0.05")),  # 0.045 rounds half-up
            (Decimal("10.00"), Decimal("1.80")),
            (Decimal("99.99"), Decimal("18.00")),  # 17.9982
            (Decimal("0.00"), Decimal("0.00")),
        ],
    )
    def test_tax_rounds_half_up_to_cents(self, subtotal, expected):
        assert calculate_tax(subtotal) == expected

    def test_multi_item_subtotal(self, place_order, make_product):
        second = make_product(sku="SKU-002", price=Decimal("2.50"))
        order = place_order(items=[(second, 4)])
        assert order.subtotal == Decimal("10.00")
        assert order.total_amount == Decimal("11.80")


class TestCreateSideEffects:
    def test_order_starts_pending_with_number(self, place_order):
        order = place_order()
        assert order.status == OrderStatus.PENDING
        assert order.order_number.startswith("ORD-")
        assert len(order.order_number) == 12
        assert order.order_date is not None

    def test_items_snapshot_product(self, place_order, product):
        order = place_order()
        product.name = "Renamed"
        product.price = Decimal("99.00")
        product.save()
        item = Order.objects.get(id=order.id).items.get()
        assert item.product_name == "Product SKU-001"
        assert item.product_sku == "SKU-001"
        assert item.unit_price == Decimal("10.00")
        assert item.quantity == 3

    def test_items_keep_request_order(self, place_order, make_product):
        a = make_product(sku="A-1")
        b = make_product(sku="B-1")
        c = make_product(sku="C-1")
        order = place_order(items=[(c, 1), (a, 1), (b, 1)])
        assert [i.product_sku for i in order.items.all()] == ["C-1", "A-1", "B-1"]

    def test_stock_reserved_not_committed(self, place_order, product):
        place_order()
        product.refresh_from_db()
        assert product.reserved_quantity == 3
        assert product.quantity_in_stock == 100
        assert product.available_stock == 97

    def test_customer_aggregates_updated(self, place_order, customer):
        place_order()
        place_order()
        customer.refresh_from_db()
        assert customer.total_orders == 2
        assert customer.total_spent == Decimal("70.80")
        assert customer.segment == CustomerSegment.REGULAR

    def test_large_order_moves_customer_to_vip(self, place_order, make_product, customer):
        expensive = make_product(sku="GOLD", price=Decimal("90000.00"), quantity_in_stock=5)
        place_order(items=[(expensive, 1)])
        customer.refresh_from_db()
        assert customer.total_spent == Decimal("106200.00")
        assert customer.segment == CustomerSegment.VIP

    def test_history_row_created(self, place_order):
        order = place_order()
        history = OrderStatusHistory.objects.get(order_id=order.id)
        assert history.old_status is None
        assert history.new_status == OrderStatus.PENDING
        assert history.notes == "Order created"

    def test_outbox_event_written(self, place_order):
        order = place_order()
        event = OutboxEvent.objects.get(event_type="OrderCreated")
        assert event.aggregate_id == str(order.id)
        assert event.topic == "orders"
        assert event.payload["total_amount"] == "35.40"


class TestCreateValidation:
    def test_unknown_customer(self, place_order):
        with pytest.raises(CustomerNotFound):
            place_order(customer_id=999_999)

    def test_inactive_customer(self, place_order, make_customer):
        inactive = make_customer(email="off@example.com", is_active=False)
        with pytest.raises(InactiveCustomer):
            place_order(customer_id=inactive.id)

    def test_empty_items(self, place_order):
        with pytest.raises(InvalidRequest):
            place_order(items=[])

    def test_customer_checked_before_items(self, place_order):
        with pytest.raises(CustomerNotFound):
            place_order(items=[], customer_id=999_999)

    def test_inactive_customer_checked_before_items(self, place_order, make_customer):
        inactive = make_customer(email="idle@example.com", is_active=False)
        with pytest.raises(InactiveCustomer):
            place_order(items=[], customer_id=inactive.id)

    def test_duplicate_products(self, place_order, product):
        with pytest.raises(InvalidRequest):
            place_order(items=[(product, 1), (product, 2)])

    def test_unknown_product(self, order_service, customer):
        dto = CreateOrderDTO(
            customer_id=customer.id,
            items=[CreateOrderItemDTO(product_id=424242, quantity=1)],
        )
        with pytest.raises(ProductNotFound):
            order_service.create_order(dto)

    def test_soft_deleted_product_is_not_found(self, place_order, product):
        product.delete()
        with pytest.raises(NotFound):
            place_order()

    def test_inactive_product(self, place_order, make_product):
        retired = make_product(sku="OLD-1", is_active=False)
        with pytest.raises(InactiveProduct):
            place_order(items=[(retired, 1)])

    def test_line_discount_above_gross(self, order_service, customer, product):
        dto = CreateOrderDTO(
            customer_id=customer.id,
            items=[
                CreateOrderItemDTO(product_id=product.id, quantity=1, discount=Decimal("10.01"))
            ],
        )
        with pytest.raises(InvalidRequest):
            order_service.create_order(dto)

    def test_order_discount_above_total(self, place_order):
        with pytest.raises(InvalidRequest):
            place_order(discount_amount=Decimal("35.41"))

    def test_insufficient_stock(self, place_order, make_product):
        scarce = make_product(sku="SCARCE", quantity_in_stock=2)
        with pytest.raises(InsufficientStock):
            place_order(items=[(scarce, 3)])


class TestAtomicity:
    def test_failure_rolls_back_earlier_reservations(self, place_order, make_product, customer):
        plenty = make_product(sku="PLENTY", quantity_in_stock=50)
        scarce = make_product(sku="SCARCE", quantity_in_stock=1)

        with pytest.raises(InsufficientStock):
            place_order(items=[(plenty, 5), (scarce, 2)])

        plenty.refresh_from_db()
        scarce.refresh_from_db()
        customer.refresh_from_db()
        assert plenty.reserved_quantity == 0
        assert scarce.reserved_quantity == 0
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0
        assert customer.total_orders == 0

    def test_discount_failure_leaves_no_reservation(self, place_order, product):
        with pytest.raises(InvalidRequest):
            place_order(discount_amount=Decimal("1000.00"))
        product.refresh_from_db()
        assert product.reserved_quantity == 0


class TestIdempotency:
    def test_same_key_returns_same_order(self, place_order, product, customer):
        first = place_order(idempotency_key="key-123")
        second = place_order(idempotency_key="key-123")
        assert first.id == second.id
        assert Order.objects.count() == 1
        product.refresh_from_db()
        customer.refresh_from_db()
        assert product.reserved_quantity == 3
        assert customer.total_orders == 1

    def test_different_keys_create_two_orders(self, place_order):
        place_order(idempotency_key="key-a")
        place_order(idempotency_key="key-b")
        assert Order.objects.count() == 2
