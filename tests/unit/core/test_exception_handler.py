"""Unit tests for ``DomainExceptionHandler``."""

from __future__ import annotations

import pytest
from drf_standardized_errors.handler import exception_handler
from pydantic import ValidationError
from rest_framework import exceptions

from modules.core.exception_handler import DomainExceptionHandler, to_api_exception
from modules.orders.dtos import CreateOrderDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderCannotBeCancelled, OrderNotFound
from modules.products.exceptions import InactiveProduct, InsufficientProductStock
from modules.products.models import Product

pytestmark = pytest.mark.unit


def _pydantic_error():
    try:
        CreateOrderDTO.model_validate({"customer_id": "abc", "items": []})
    except ValidationError as exc:
        return exc
    raise AssertionError("expected a validation error")


def _handle(exc):
    return DomainExceptionHandler(exc, {}).run()


class TestDomainErrors:
    @pytest.mark.parametrize(
        "exc,status_code,code",
        [
            (OrderNotFound("missing"), 404, "order_not_found"),
            (InactiveProduct("off"), 400, "inactive_product"),
            (
                InsufficientProductStock(Product(id=1, sku="X"), 5, 2),
                409,
                "insufficient_stock",
            ),
            (InvalidOrderStatus("PENDING", "SHIPPED"), 409, "invalid_order_transition"),
            (OrderCannotBeCancelled("shipped"), 409, "order_not_cancellable"),
        ],
    )
    def test_maps_family_to_status(self, exc, status_code, code):
        response = _handle(exc)
        assert response.status_code == status_code
        assert response.data == {
            "type": "client_error",
            "errors": [{"code": code, "detail": str(exc), "attr": None}],
        }

    def test_conversion_keeps_code_and_message(self):
        api_exc = to_api_exception(OrderNotFound("Order 7 not found."))
        assert isinstance(api_exc, exceptions.NotFound)
        assert api_exc.get_codes() == "order_not_found"
        assert str(api_exc.detail) == "Order 7 not found."

    def test_configured_as_project_handler(self):
        response = exception_handler(OrderNotFound("missing"), {})
        assert response.status_code == 404
        assert response.data["errors"][0]["code"] == "order_not_found"


class TestFrameworkErrors:
    def test_pydantic_errors_become_validation_error(self):
        response = _handle(_pydantic_error())
        assert response.status_code == 400
        assert response.data["type"] == "validation_error"
        assert response.data["errors"][0]["attr"] == "customer_id"

    def test_drf_validation_error_is_flattened(self):
        exc = exceptions.ValidationError({"items": [{"quantity": ["Too small."]}]})
        response = _handle(exc)
        assert response.status_code == 400
        assert response.data == {
            "type": "validation_error",
            "errors": [{"code": "invalid", "detail": "Too small.", "attr": "items.0.quantity"}],
        }

    def test_not_authenticated(self):
        response = _handle(exceptions.NotAuthenticated())
        assert response.status_code == 401
        assert response.data["type"] == "client_error"
        assert response.data["errors"][0]["code"] == "not_authenticated"
