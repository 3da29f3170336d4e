"""Customer segmentation rule.

Segment is a pure function of lifetime spend; this is the single place
the thresholds live.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models


class CustomerSegment(models.TextChoices):
    REGULAR = "REGULAR", "Regular"
    PREMIUM = "PREMIUM", "Premium"
    VIP = "VIP", "VIP"


PREMIUM_THRESHOLD = Decimal("50000")
VIP_THRESHOLD = Decimal("100000")

CUSTOMER_CODE_PREFIX = "CUST"


def segment_for(total_spent: Decimal) -> str:
    """Return the segment for ``total_spent`` (strictly-greater thresholds)."""
    if total_spent > VIP_THRESHOLD:
        return CustomerSegment.VIP
    if total_spent > PREMIUM_THRESHOLD:
        return CustomerSegment.PREMIUM
    return CustomerSegment.REGULAR
