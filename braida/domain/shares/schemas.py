"""Share domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ShareBookingRequest(BaseModel):
    """Schema for creating a share link"""

    recipientName: str
    recipientEmail: Optional[str] = None
    recipientPhone: Optional[str] = None
    expiresInHours: Optional[int] = None


class ShareBookingResponse(BaseModel):
    """Schema for a newly issued share link; the only time the code is returned"""

    shareLink: str
    shareCode: str
    expiresAt: datetime


class RevokeShareRequest(BaseModel):
    shareCode: str


class RevokeShareResponse(BaseModel):
    success: bool
    alreadyRevoked: bool


class SharedBookingResponse(BaseModel):
    """Schema for the public view of a shared booking.

    Adding a field here exposes it to anyone holding a link.
    """

    stylistName: str
    clientName: str
    serviceTitle: str
    appointmentDate: str
    appointmentTime: str
    estimatedEndTime: str
    startsAt: datetime
    endsAt: datetime
    approximateLocation: Optional[str]
    status: str
