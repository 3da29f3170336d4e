"""Customer DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    """Read serializer for the Customer resource."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "customer_code",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone",
            "company_name",
            "is_active",
            "segment",
            "total_orders",
            "total_spent",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
