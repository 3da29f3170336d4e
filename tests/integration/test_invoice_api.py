"""Integration tests for the Invoice API endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from modules.billing.models import Invoice

pytestmark = pytest.mark.integration

INVOICES_URL = "/api/v1/invoices/"


class TestInvoiceQueries:
    def test_list(self, auth_client, invoice):
        response = auth_client.get(INVOICES_URL)
        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 1
        assert data["results"][0]["invoice_number"] == invoice.invoice_number

    def test_filter_by_status(self, auth_client, invoice):
        assert auth_client.get(INVOICES_URL, {"status": "draft"}).json()["count"] == 1
        assert auth_client.get(INVOICES_URL, {"status": "paid"}).json()["count"] == 0

    def test_retrieve(self, auth_client, invoice):
        response = auth_client.get(f"{INVOICES_URL}{invoice.id}/")
        assert response.status_code == 200
        data = response.json()
        assert data["total_amount"] == "35.40"
        assert data["paid_amount"] == "0.00"
        assert data["balance_amount"] == "35.40"

    def test_retrieve_unknown(self, auth_client):
        response = auth_client.get(f"{INVOICES_URL}999999/")
        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "invoice_not_found"

    def test_overdue(self, auth_client, invoice):
        assert auth_client.get(f"{INVOICES_URL}overdue/").json() == []
        Invoice.objects.filter(id=invoice.id).update(
            status="SENT", due_date=timezone.localdate() - timedelta(days=1)
        )
        response = auth_client.get(f"{INVOICES_URL}overdue/")
        assert [i["id"] for i in response.json()] == [invoice.id]


class TestInvoiceCommands:
    def test_patch_status(self, auth_client, invoice):
        response = auth_client.patch(f"{INVOICES_URL}{invoice.id}/", {"status": "SENT"}, format="json")
        assert response.status_code == 200
        assert response.json()["status"] == "SENT"

    def test_invalid_transition(self, auth_client, invoice):
        auth_client.patch(f"{INVOICES_URL}{invoice.id}/", {"status": "CANCELLED"}, format="json")
        response = auth_client.patch(f"{INVOICES_URL}{invoice.id}/", {"status": "SENT"}, format="json")
        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_invoice_transition"

    def test_mark_paid(self, auth_client, invoice):
        response = auth_client.post(f"{INVOICES_URL}{invoice.id}/mark-paid/")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "PAID"
        assert data["balance_amount"] == "0.00"
        assert data["paid_at"] is not None
