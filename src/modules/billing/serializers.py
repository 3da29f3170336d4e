"""Invoice DRF serializers (read side)."""

from __future__ import annotations

from rest_framework import serializers

from modules.billing.models import Invoice


class InvoiceSerializer(serializers.ModelSerializer):
    """Read serializer with the derived balance."""

    order_number = serializers.CharField(source="order.order_number", read_only=True)
    balance_amount = serializers.DecimalField(max_digits=15, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            "id",
            "invoice_number",
            "order_id",
            "order_number",
            "customer_id",
            "invoice_date",
            "due_date",
            "status",
            "subtotal",
            "tax_amount",
            "total_amount",
            "paid_amount",
            "balance_amount",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
