"""Integration tests for the Order API endpoints."""

from __future__ import annotations

import pytest

from modules.orders.models import Order

pytestmark = pytest.mark.integration

ORDERS_URL = "/api/v1/orders/"


def _payload(customer, product, quantity=3, **extra):
    data = {
        "customer_id": customer.id,
        "items": [{"product_id": product.id, "quantity": quantity}],
    }
    data.update(extra)
    return data


class TestCreateOrder:
    def test_create_returns_201_with_totals(self, auth_client, customer, product):
        response = auth_client.post(ORDERS_URL, _payload(customer, product), format="json")

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PENDING"
        assert data["order_number"].startswith("ORD-")
        assert data["subtotal"] == "30.00"
        assert data["tax_amount"] == "5.40"
        assert data["total_amount"] == "35.40"
        assert data["items"][0]["product_sku"] == "SKU-001"
        assert data["items"][0]["line_total"] == "30.00"
        assert data["status_history"][0]["new_status"] == "PENDING"

    def test_idempotency_key_replay_returns_200(self, auth_client, customer, product):
        headers = {"HTTP_IDEMPOTENCY_KEY": "abc-123"}
        first = auth_client.post(ORDERS_URL, _payload(customer, product), format="json", **headers)
        second = auth_client.post(ORDERS_URL, _payload(customer, product), format="json", **headers)

        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        assert Order.objects.count() == 1

    def test_insufficient_stock_returns_409(self, auth_client, customer, make_product):
        scarce = make_product(sku="SCARCE", quantity_in_stock=1)
        response = auth_client.post(ORDERS_URL, _payload(customer, scarce, quantity=2), format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "insufficient_stock"

    def test_empty_items_returns_400(self, auth_client, customer):
        response = auth_client.post(
            ORDERS_URL, {"customer_id": customer.id, "items": []}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_request"

    def test_unknown_customer_returns_404(self, auth_client, product):
        response = auth_client.post(
            ORDERS_URL,
            {"customer_id": 999999, "items": [{"product_id": product.id, "quantity": 1}]},
            format="json",
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "customer_not_found"

    def test_unknown_customer_with_no_items_returns_404(self, auth_client):
        response = auth_client.post(
            ORDERS_URL, {"customer_id": 999999, "items": []}, format="json"
        )
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "customer_not_found"

    def test_zero_quantity_is_validation_error(self, auth_client, customer, product):
        response = auth_client.post(
            ORDERS_URL, _payload(customer, product, quantity=0), format="json"
        )
        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "items.0.quantity"

    def test_sub_cent_line_discount_is_validation_error(self, auth_client, customer, product):
        payload = _payload(customer, product)
        payload["items"][0]["discount"] = "0.005"
        response = auth_client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "items.0.discount"

    def test_sub_cent_order_discount_is_validation_error(self, auth_client, customer, product):
        response = auth_client.post(
            ORDERS_URL, _payload(customer, product, discount_amount="1.999"), format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "discount_amount"

    def test_requires_authentication(self, api_client, customer, product):
        response = api_client.post(ORDERS_URL, _payload(customer, product), format="json")
        assert response.status_code == 401


class TestListAndRetrieve:
    def test_list_is_paginated(self, auth_client, place_order):
        place_order()
        place_order()
        response = auth_client.get(ORDERS_URL)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert len(data["results"]) == 2
        assert "items" not in data["results"][0]

    def test_filter_by_status(self, auth_client, place_order, order_service):
        keep = place_order()
        cancelled = place_order()
        order_service.cancel_order(cancelled.id)

        response = auth_client.get(ORDERS_URL, {"status": "pending"})
        ids = [o["id"] for o in response.json()["results"]]
        assert ids == [keep.id]

    def test_filter_by_customer(self, auth_client, place_order, make_customer):
        other = make_customer(email="other@example.com")
        mine = place_order()
        place_order(customer_id=other.id)

        response = auth_client.get(ORDERS_URL, {"customer": mine.customer_id})
        assert [o["id"] for o in response.json()["results"]] == [mine.id]

    def test_retrieve(self, auth_client, place_order):
        order = place_order()
        response = auth_client.get(f"{ORDERS_URL}{order.id}/")
        assert response.status_code == 200
        assert response.json()["order_number"] == order.order_number

    def test_retrieve_unknown_returns_404(self, auth_client):
        response = auth_client.get(f"{ORDERS_URL}999999/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "order_not_found"


class TestStatusChanges:
    def test_patch_status(self, auth_client, place_order, product):
        order = place_order()
        response = auth_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "CONFIRMED", "notes": "ok"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"
        product.refresh_from_db()
        assert product.quantity_in_stock == 97

    def test_invalid_transition_returns_409(self, auth_client, place_order):
        order = place_order()
        response = auth_client.patch(
            f"{ORDERS_URL}{order.id}/", {"status": "DELIVERED"}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "invalid_order_transition"

    def test_unknown_status_is_validation_error(self, auth_client, place_order):
        order = place_order()
        response = auth_client.patch(f"{ORDERS_URL}{order.id}/", {"status": "LOST"}, format="json")
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_cancel_action(self, auth_client, place_order, product):
        order = place_order()
        response = auth_client.post(
            f"{ORDERS_URL}{order.id}/cancel/", {"reason": "changed mind"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        product.refresh_from_db()
        assert product.reserved_quantity == 0

    def test_cancel_shipped_returns_409(self, auth_client, place_order):
        order = place_order()
        Order.objects.filter(id=order.id).update(status="SHIPPED")
        response = auth_client.post(f"{ORDERS_URL}{order.id}/cancel/", {}, format="json")
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "order_not_cancellable"


class TestInvoiceAction:
    def test_invoice_confirmed_order(self, auth_client, confirmed_order):
        response = auth_client.post(f"{ORDERS_URL}{confirmed_order.id}/invoice/")
        assert response.status_code == 201
        data = response.json()
        assert data["order_number"] == confirmed_order.order_number
        assert data["status"] == "DRAFT"
        assert data["balance_amount"] == "35.40"

    def test_second_invoice_returns_400(self, auth_client, invoice, confirmed_order):
        response = auth_client.post(f"{ORDERS_URL}{confirmed_order.id}/invoice/")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invoice_already_exists"

    def test_pending_order_not_invoiceable(self, auth_client, place_order):
        order = place_order()
        response = auth_client.post(f"{ORDERS_URL}{order.id}/invoice/")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "order_not_invoiceable"
