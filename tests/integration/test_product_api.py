"""Integration tests for the Product API endpoints."""

import pytest

pytestmark = pytest.mark.integration

PRODUCTS_URL = "/api/v1/products/"


class TestProductApi:
    def test_create(self, auth_client):
        response = auth_client.post(
            PRODUCTS_URL,
            {"sku": "new-1", "name": "Widget", "price": "19.90", "quantity_in_stock": 10},
            format="json",
        )
        assert response.status_code == 201
        data = response.json()
        assert data["sku"] == "NEW-1"
        assert data["available_stock"] == 10
        assert data["reserved_quantity"] == 0

    def test_non_positive_price_is_validation_error(self, auth_client):
        response = auth_client.post(
            PRODUCTS_URL, {"sku": "X", "name": "Free", "price": "0"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "price"

    def test_duplicate_sku(self, auth_client, product):
        response = auth_client.post(
            PRODUCTS_URL, {"sku": product.sku, "name": "Clone", "price": "1.00"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "product_already_exists"

    def test_retrieve_shows_reservations(self, auth_client, product, place_order):
        place_order()
        data = auth_client.get(f"{PRODUCTS_URL}{product.id}/").json()
        assert data["quantity_in_stock"] == 100
        assert data["reserved_quantity"] == 3
        assert data["available_stock"] == 97

    def test_patch_cannot_touch_stock(self, auth_client, product):
        response = auth_client.patch(
            f"{PRODUCTS_URL}{product.id}/",
            {"name": "Better", "quantity_in_stock": 1},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Better"
        assert response.json()["quantity_in_stock"] == 100

    def test_adjust_stock(self, auth_client, product):
        response = auth_client.post(
            f"{PRODUCTS_URL}{product.id}/adjust-stock/", {"delta": -40, "reason": "damaged"}, format="json"
        )
        assert response.status_code == 200
        assert response.json()["quantity_in_stock"] == 60

    def test_adjust_below_zero_returns_409(self, auth_client, product):
        response = auth_client.post(
            f"{PRODUCTS_URL}{product.id}/adjust-stock/", {"delta": -101}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "insufficient_stock"

    def test_low_stock(self, auth_client, make_product):
        make_product(sku="LOW", quantity_in_stock=2, min_stock_level=5)
        make_product(sku="FINE", quantity_in_stock=50, min_stock_level=5)
        response = auth_client.get(f"{PRODUCTS_URL}low-stock/")
        assert response.status_code == 200
        assert [p["sku"] for p in response.json()] == ["LOW"]

    def test_delete_then_404(self, auth_client, product):
        assert auth_client.delete(f"{PRODUCTS_URL}{product.id}/").status_code == 204
        assert auth_client.get(f"{PRODUCTS_URL}{product.id}/").status_code == 404
