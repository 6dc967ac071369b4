"""Pricing domain schemas - Pydantic models for validation"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PricingConfig(BaseModel):
    """Platform fee settings; rates are fractions, minimums are pence"""

    model_config = ConfigDict(frozen=True)

    platform_fee_rate: Decimal = Field(Decimal("0.15"), ge=0, le=1)
    processing_fee_rate: Decimal = Field(Decimal("0.029"), ge=0, le=1)
    minimum_platform_fee: int = Field(100, ge=0)
    minimum_processing_fee: int = Field(30, ge=0)


class PriceBreakdown(BaseModel):
    """Result of pricing a booking or package. Every amount is in pence.

    ``discount`` is the discount actually applied, which is capped at
    ``base_price`` so that ``total`` always reconciles:

        total == (base_price - discount) + platform_fee + processing_fee
        freelancer_earnings == (base_price - discount) - platform_fee
    """

    model_config = ConfigDict(frozen=True)

    base_price: int
    discount: int
    platform_fee: int
    processing_fee: int
    total: int
    freelancer_earnings: int

    @property
    def net_price(self) -> int:
        return self.base_price - self.discount


class PackageLineItem(BaseModel):
    """One service inside a package"""

    model_config = ConfigDict(frozen=True)

    price: int
    service_id: Optional[int] = None
    title: Optional[str] = None


class BookingQuoteRequest(BaseModel):
    """Schema for pricing a single booking"""

    basePrice: int
    discountAmount: int = 0


class PackageItemRequest(BaseModel):
    serviceId: Optional[int] = None
    title: Optional[str] = None
    price: int


class PackageQuoteRequest(BaseModel):
    """Schema for pricing a package of services"""

    items: list[PackageItemRequest]
    discountAmount: int = 0


class PriceBreakdownResponse(BaseModel):
    """Schema for price breakdown response"""

    basePrice: int
    discount: int
    platformFee: int
    processingFee: int
    total: int
    freelancerEarnings: int
    formatted: dict[str, str]
