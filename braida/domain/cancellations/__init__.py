from .router import get_cancellation_service, router
from .schemas import DEFAULT_CLIENT_CANCEL_TIERS, CancellationPolicyTier, RefundCalculation
from .service import (
    CancellationService,
    calculate_refund,
    compute_refund_amount,
    hours_before,
    order_tiers,
)

__all__ = [
    "router",
    "get_cancellation_service",
    "CancellationPolicyTier",
    "DEFAULT_CLIENT_CANCEL_TIERS",
    "RefundCalculation",
    "CancellationService",
    "calculate_refund",
    "compute_refund_amount",
    "hours_before",
    "order_tiers",
]
