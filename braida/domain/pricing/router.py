"""Pricing router - FastAPI endpoints for price quotes"""

import logging

from fastapi import APIRouter

from ...errors import InvalidArgumentError
from ...shared.money import format_pence
from .schemas import (
    BookingQuoteRequest,
    PackageLineItem,
    PackageQuoteRequest,
    PriceBreakdown,
    PriceBreakdownResponse,
)
from .service import compute_booking_price, compute_package_price

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def _require_non_negative(value: int, field: str) -> None:
    if value < 0:
        raise InvalidArgumentError(f"{field} cannot be negative")


def _to_response(breakdown: PriceBreakdown) -> PriceBreakdownResponse:
    return PriceBreakdownResponse(
        basePrice=breakdown.base_price,
        discount=breakdown.discount,
        platformFee=breakdown.platform_fee,
        processingFee=breakdown.processing_fee,
        total=breakdown.total,
        freelancerEarnings=breakdown.freelancer_earnings,
        formatted={
            "basePrice": format_pence(breakdown.base_price),
            "discount": format_pence(breakdown.discount),
            "platformFee": format_pence(breakdown.platform_fee),
            "processingFee": format_pence(breakdown.processing_fee),
            "total": format_pence(breakdown.total),
            "freelancerEarnings": format_pence(breakdown.freelancer_earnings),
        },
    )


@router.post("/quote", response_model=PriceBreakdownResponse)
async def quote_booking(data: BookingQuoteRequest):
    """Price a single booking"""
    _require_non_negative(data.basePrice, "basePrice")
    _require_non_negative(data.discountAmount, "discountAmount")

    return _to_response(compute_booking_price(data.basePrice, data.discountAmount))


@router.post("/package-quote", response_model=PriceBreakdownResponse)
async def quote_package(data: PackageQuoteRequest):
    """Price a package of services"""
    if not data.items:
        raise InvalidArgumentError("A package needs at least one service")
    for item in data.items:
        _require_non_negative(item.price, "price")
    _require_non_negative(data.discountAmount, "discountAmount")

    line_items = [
        PackageLineItem(price=item.price, service_id=item.serviceId, title=item.title)
        for item in data.items
    ]
    logger.info(f"📦 Pricing package of {len(line_items)} services")
    return _to_response(compute_package_price(line_items, data.discountAmount))
