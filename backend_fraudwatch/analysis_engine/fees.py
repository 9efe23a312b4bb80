"""
Fee split for a transaction amount.

The insurance fee is 2% of the amount; it is divided 25% to the platform and
75% to the seller. Pure function; amount validation happens upstream.
"""

from __future__ import annotations

from dataclasses import dataclass

INSURANCE_RATE = 0.02
PLATFORM_SHARE = 0.25
SELLER_SHARE = 0.75


@dataclass(frozen=True)
class FeeBreakdown:
    insurance_fee: float
    platform_fee: float
    seller_share: float


def compute_fees(amount: float) -> FeeBreakdown:
    insurance_fee = amount * INSURANCE_RATE
    return FeeBreakdown(
        insurance_fee=insurance_fee,
        platform_fee=insurance_fee * PLATFORM_SHARE,
        seller_share=insurance_fee * SELLER_SHARE,
    )
