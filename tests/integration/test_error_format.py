"""Integration tests for standardized error responses."""

import pytest

pytestmark = pytest.mark.integration


class TestStandardizedErrors:
    def test_auth_error_has_standard_format(self, api_client):
        response = api_client.get("/api/v1/customers/")
        assert response.status_code == 401
        data = response.json()
        assert data["type"] == "client_error"
        assert isinstance(data["errors"], list)
        assert data["errors"]
        assert "code" in data["errors"][0]
        assert "detail" in data["errors"][0]

    def test_malformed_json_has_standard_format(self, auth_client):
        response = auth_client.post("/api/v1/customers/", data="{", content_type="application/json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "client_error"
        assert data["errors"][0]["code"] == "parse_error"

    def test_dto_validation_error_lists_fields(self, auth_client):
        response = auth_client.post("/api/v1/orders/", {}, format="json")
        assert response.status_code == 400
        data = response.json()
        assert data["type"] == "validation_error"
        assert {e["attr"] for e in data["errors"]} == {"customer_id", "items"}

    def test_domain_not_found(self, auth_client):
        response = auth_client.get("/api/v1/products/999999/")
        assert response.status_code == 404
        assert response.json() == {
            "type": "client_error",
            "errors": [
                {"code": "product_not_found", "detail": "Product 999999 not found.", "attr": None}
            ],
        }

    def test_malformed_id_is_not_found(self, auth_client):
        response = auth_client.get("/api/v1/orders/abc/")
        assert response.status_code == 404

    def test_domain_conflict(self, auth_client, place_order):
        order = place_order()
        response = auth_client.patch(
            f"/api/v1/orders/{order.id}/", {"status": "SHIPPED"}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["type"] == "client_error"
