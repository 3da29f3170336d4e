"""Payment DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    invoice_number = serializers.CharField(source="invoice.invoice_number", read_only=True)

    class Meta:
        model = Payment
        fields = [
            "id",
            "reference_number",
            "invoice_id",
            "invoice_number",
            "method",
            "amount",
            "status",
            "payment_date",
            "transaction_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
