import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_user_id():
    """Generate an opaque user identifier"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(64), primary_key=True, default=generate_user_id)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)  # Never exposed through share links
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    freelancer_profile = relationship("FreelancerProfile", back_populates="user", uselist=False)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class UserSession(Base):
    """Bearer session issued by the login flow; only the SHA-256 of the token is stored"""

    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    token_hash = Column(String(64), unique=True, index=True, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User")


class FreelancerProfile(Base):
    __tablename__ = "freelancer_profiles"

    user_id = Column(String(64), ForeignKey("users.id"), primary_key=True)
    display_name = Column(String(255), nullable=False)
    location_area = Column(String(255), nullable=True)  # Coarse area, e.g. "Hackney, London"
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="freelancer_profile")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    freelancer_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    base_price_pence = Column(Integer, nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=False, default=60)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    freelancer_id = Column(String(64), ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    start_datetime = Column(DateTime(timezone=True), nullable=False)
    end_datetime = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(50), nullable=False, default="pending")  # pending, confirmed, completed, cancelled
    # Private details - never part of a shared view
    address_line = Column(String(500), nullable=True)
    postcode = Column(String(20), nullable=True)
    total_price_pence = Column(Integer, nullable=False, default=0)
    payment_status = Column(String(50), nullable=True)  # unpaid, paid, refunded, partially_refunded
    stripe_payment_intent_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    client = relationship("User", foreign_keys=[client_id])
    freelancer = relationship("User", foreign_keys=[freelancer_id])
    service = relationship("Service")
    shares = relationship("BookingShare", back_populates="booking")


class BookingShare(Base):
    """Capability link granting anonymous, read-only access to a redacted booking view"""

    __tablename__ = "booking_shares"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    share_code = Column(String(64), unique=True, index=True, nullable=False)
    shared_by = Column(String(64), ForeignKey("users.id"), nullable=False)
    recipient_name = Column(String(255), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    recipient_phone = Column(String(50), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    is_revoked = Column(Boolean, default=False, nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)
    last_accessed_at = Column(DateTime(timezone=True), nullable=True)
    access_count = Column(Integer, default=0, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    booking = relationship("Booking", back_populates="shares")


class CancellationPolicy(Base):
    __tablename__ = "cancellation_policies"

    id = Column(Integer, primary_key=True, index=True)
    policy_type = Column(String(50), nullable=False, default="client_cancel", index=True)
    hours_threshold = Column(Integer, nullable=False)
    refund_percentage = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
