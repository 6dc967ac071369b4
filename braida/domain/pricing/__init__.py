from .router import router
from .schemas import PackageLineItem, PriceBreakdown, PricingConfig
from .service import compute_booking_price, compute_package_price, default_pricing_config

__all__ = [
    "router",
    "PackageLineItem",
    "PriceBreakdown",
    "PricingConfig",
    "compute_booking_price",
    "compute_package_price",
    "default_pricing_config",
]
