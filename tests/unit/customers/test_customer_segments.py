"""Unit tests for customer segmentation and running order totals."""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.customers.constants import CustomerSegment, segment_for

pytestmark = pytest.mark.unit


class TestSegmentFor:
    @pytest.mark.parametrize(
        "total_spent,expected",
        [
            (Decimal("0.00"), CustomerSegment.REGULAR),
            (Decimal("50000.00"), CustomerSegment.REGULAR),
            (Decimal("50000.01"), CustomerSegment.PREMIUM),
            (Decimal("100000.00"), CustomerSegment.PREMIUM),
            (Decimal("100000.01"), CustomerSegment.VIP),
        ],
    )
    def test_thresholds_are_strictly_greater(self, total_spent, expected):
        assert segment_for(total_spent) == expected


class TestRecordOrder:
    def test_new_customer_defaults(self, customer):
        assert customer.total_orders == 0
        assert customer.total_spent == Decimal("0.00")
        assert customer.segment == CustomerSegment.REGULAR
        assert customer.customer_code.startswith("CUST-")

    def test_accumulates_and_resegments(self, customer):
        customer.record_order(Decimal("30000.00"))
        assert customer.segment == CustomerSegment.REGULAR
        customer.record_order(Decimal("30000.00"))
        assert customer.total_orders == 2
        assert customer.total_spent == Decimal("60000.00")
        assert customer.segment == CustomerSegment.PREMIUM
