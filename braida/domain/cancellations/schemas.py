"""Cancellation domain schemas - Pydantic models for validation"""

from pydantic import BaseModel, ConfigDict, Field


class CancellationPolicyTier(BaseModel):
    """Minimum notice (hours) that earns a refund percentage"""

    model_config = ConfigDict(frozen=True)

    hours_threshold: int = Field(..., ge=0)
    refund_percentage: int = Field(..., ge=0, le=100)

    @property
    def label(self) -> str:
        return f"client_cancel_{self.hours_threshold}h_{self.refund_percentage}pct"


DEFAULT_CLIENT_CANCEL_TIERS = (
    CancellationPolicyTier(hours_threshold=48, refund_percentage=100),
    CancellationPolicyTier(hours_threshold=24, refund_percentage=50),
    CancellationPolicyTier(hours_threshold=0, refund_percentage=0),
)


class RefundCalculation(BaseModel):
    """Refund owed for a cancellation. Amounts are pence."""

    model_config = ConfigDict(frozen=True)

    refund_percentage: int
    refund_amount: int
    hours_before_service: int
    applied_policy: str


class RefundQuoteResponse(BaseModel):
    """Schema for refund preview response"""

    bookingId: int
    cancelledBy: str
    refundPercentage: int
    refundAmount: int
    refundAmountFormatted: str
    hoursBeforeService: int
    appliedPolicy: str
