"""Cancellation router - FastAPI endpoints for refund previews"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.money import format_pence
from .schemas import RefundQuoteResponse
from .service import CancellationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["Cancellations"])


def get_cancellation_service(db: Session = Depends(get_db)) -> CancellationService:
    """Dependency injection for CancellationService"""
    return CancellationService(db)


@router.get("/{booking_id}/refund-quote", response_model=RefundQuoteResponse)
async def get_refund_quote(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: CancellationService = Depends(get_cancellation_service),
):
    """Preview the refund if the current user cancelled this booking now"""
    cancelled_by, calculation = service.quote_refund(booking_id, current_user)
    return RefundQuoteResponse(
        bookingId=booking_id,
        cancelledBy=cancelled_by,
        refundPercentage=calculation.refund_percentage,
        refundAmount=calculation.refund_amount,
        refundAmountFormatted=format_pence(calculation.refund_amount),
        hoursBeforeService=calculation.hours_before_service,
        appliedPolicy=calculation.applied_policy,
    )
