"""Pricing service - fee, discount and payout arithmetic for bookings and packages

Every amount is integer pence. Each fee is rounded to the penny on its own
(half away from zero) and the total is the exact sum of the rounded parts, so
a breakdown always reconciles to the penny. Inputs are trusted: the router
rejects negative amounts and empty packages before calling in here.
"""

import logging
from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from ... import config
from ...shared.money import apply_rate
from .schemas import PackageLineItem, PriceBreakdown, PricingConfig

logger = logging.getLogger(__name__)


def default_pricing_config() -> PricingConfig:
    """Platform pricing settings from the environment"""
    return PricingConfig(
        platform_fee_rate=Decimal(config.PLATFORM_FEE_RATE),
        processing_fee_rate=Decimal(config.PROCESSING_FEE_RATE),
        minimum_platform_fee=config.MINIMUM_PLATFORM_FEE_PENCE,
        minimum_processing_fee=config.MINIMUM_PROCESSING_FEE_PENCE,
    )


def compute_booking_price(
    base_price: int,
    discount_amount: int = 0,
    pricing: Optional[PricingConfig] = None,
) -> PriceBreakdown:
    """Price a booking: apply the discount, then add platform and processing fees"""
    pricing = pricing or default_pricing_config()

    net = max(0, base_price - discount_amount)
    platform_fee = max(pricing.minimum_platform_fee, apply_rate(net, pricing.platform_fee_rate))
    processing_fee = max(
        pricing.minimum_processing_fee, apply_rate(net, pricing.processing_fee_rate)
    )

    freelancer_earnings = net - platform_fee
    if freelancer_earnings < 0:
        # Minimum platform fee is larger than the booking itself
        logger.warning(
            f"⚠️ Platform fee {platform_fee}p exceeds net price {net}p - freelancer earnings {freelancer_earnings}p"
        )

    return PriceBreakdown(
        base_price=base_price,
        discount=base_price - net,
        platform_fee=platform_fee,
        processing_fee=processing_fee,
        total=net + platform_fee + processing_fee,
        freelancer_earnings=freelancer_earnings,
    )


def compute_package_price(
    line_items: Iterable[PackageLineItem],
    discount_amount: int = 0,
    pricing: Optional[PricingConfig] = None,
) -> PriceBreakdown:
    """Price a package as one booking whose base price is the sum of its services"""
    base_price = sum(item.price for item in line_items)
    return compute_booking_price(base_price, discount_amount, pricing)
