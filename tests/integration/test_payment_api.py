"""Integration tests for payment capture and the Payment API endpoints."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.models import Payment

pytestmark = pytest.mark.integration

PAYMENTS_URL = "/api/v1/payments/"


def _invoice_payments_url(invoice):
    return f"/api/v1/invoices/{invoice.id}/payments/"


class TestCapturePayment:
    def test_full_payment(self, auth_client, invoice):
        response = auth_client.post(
            _invoice_payments_url(invoice), {"amount": "35.40", "method": "PIX"}, format="json"
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "COMPLETED"
        assert data["invoice_number"] == invoice.invoice_number
        assert data["transaction_id"].startswith("TXN-")

        invoice_data = auth_client.get(f"/api/v1/invoices/{invoice.id}/").json()
        assert invoice_data["status"] == "PAID"
        assert invoice_data["balance_amount"] == "0.00"

    def test_overpayment_rejected(self, auth_client, invoice):
        response = auth_client.post(
            _invoice_payments_url(invoice), {"amount": "100.00", "method": "CASH"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_payment_amount"
        assert not Payment.objects.exists()

    def test_fraction_of_cent_rejected(self, auth_client, invoice):
        response = auth_client.post(
            _invoice_payments_url(invoice), {"amount": "0.001", "method": "PIX"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_payment_amount"
        assert not Payment.objects.exists()

    def test_unknown_method_is_validation_error(self, auth_client, invoice):
        response = auth_client.post(
            _invoice_payments_url(invoice), {"amount": "10.00", "method": "BITCOIN"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_list_invoice_payments(self, auth_client, invoice):
        url = _invoice_payments_url(invoice)
        auth_client.post(url, {"amount": "10.00", "method": "PIX"}, format="json")
        auth_client.post(url, {"amount": "5.00", "method": "CASH"}, format="json")

        response = auth_client.get(url)
        assert response.status_code == 200
        assert sorted(p["amount"] for p in response.json()) == ["10.00", "5.00"]

    def test_unknown_invoice(self, auth_client):
        response = auth_client.post(
            "/api/v1/invoices/999999/payments/", {"amount": "1.00", "method": "PIX"}, format="json"
        )
        assert response.status_code == 404


class TestPaymentEndpoints:
    def test_list_and_filter(self, auth_client, payment_service, invoice):
        payment_service.process(invoice.id, ProcessPaymentDTO(amount=Decimal("10.00"), method="PIX"))

        response = auth_client.get(PAYMENTS_URL, {"method": "pix"})
        assert response.json()["count"] == 1
        assert auth_client.get(PAYMENTS_URL, {"method": "cash"}).json()["count"] == 0

    def test_completed_payment_is_terminal(self, auth_client, payment_service, invoice):
        payment = payment_service.process(
            invoice.id, ProcessPaymentDTO(amount=Decimal("10.00"), method="PIX")
        )
        response = auth_client.patch(f"{PAYMENTS_URL}{payment.id}/", {"status": "FAILED"}, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_payment_transition"

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"{PAYMENTS_URL}999999/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "payment_not_found"
