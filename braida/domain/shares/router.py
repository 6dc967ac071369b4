"""Share router - FastAPI endpoints for booking share links"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ... import config
from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from ..bookings.repository import SqlAlchemyBookingLookup
from .repository import SqlAlchemyShareStore
from .schemas import (
    RevokeShareRequest,
    RevokeShareResponse,
    ShareBookingRequest,
    ShareBookingResponse,
    SharedBookingResponse,
)
from .service import ShareTokenService, build_share_link

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Booking Shares"])

shared_booking_rate_limit = create_rate_limiter(
    limit=config.SHARE_RESOLVE_RATE_LIMIT,
    window_seconds=config.SHARE_RESOLVE_RATE_WINDOW_SECONDS,
    key_prefix="shared_booking",
)


def get_share_service(db: Session = Depends(get_db)) -> ShareTokenService:
    """Dependency injection for ShareTokenService"""
    return ShareTokenService(SqlAlchemyShareStore(db), SqlAlchemyBookingLookup(db))


@router.post("/bookings/{booking_id}/share", response_model=ShareBookingResponse)
async def share_booking(
    booking_id: int,
    data: ShareBookingRequest,
    current_user: User = Depends(get_current_user),
    service: ShareTokenService = Depends(get_share_service),
):
    """Create a time-limited link to this booking for someone without an account"""
    issued = service.issue(
        booking_id,
        current_user.id,
        data.recipientName,
        recipient_email=data.recipientEmail,
        recipient_phone=data.recipientPhone,
        ttl_hours=data.expiresInHours,
    )
    return ShareBookingResponse(
        shareLink=build_share_link(config.APP_URL, issued.token),
        shareCode=issued.token,
        expiresAt=issued.expires_at,
    )


@router.get("/shared-booking/{share_code}", response_model=SharedBookingResponse)
async def get_shared_booking(
    share_code: str,
    _: None = Depends(shared_booking_rate_limit),
    service: ShareTokenService = Depends(get_share_service),
):
    """Public, unauthenticated view of a shared booking"""
    view = service.resolve(share_code)
    return SharedBookingResponse(
        stylistName=view.stylist_name,
        clientName=view.client_name,
        serviceTitle=view.service_title,
        appointmentDate=view.appointment_date,
        appointmentTime=view.appointment_time,
        estimatedEndTime=view.estimated_end_time,
        startsAt=view.starts_at,
        endsAt=view.ends_at,
        approximateLocation=view.approximate_location,
        status=view.status,
    )


@router.post("/bookings/{booking_id}/share/revoke", response_model=RevokeShareResponse)
async def revoke_booking_share(
    booking_id: int,
    data: RevokeShareRequest,
    current_user: User = Depends(get_current_user),
    service: ShareTokenService = Depends(get_share_service),
):
    """Revoke a share link you created"""
    result = service.revoke(booking_id, data.shareCode, current_user.id)
    return RevokeShareResponse(success=True, alreadyRevoked=result.already_revoked)
