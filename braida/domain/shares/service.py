"""Share service - issue, resolve and revoke booking share links

A share link is a bearer capability: whoever holds the token can see a
redacted view of one booking until the link expires or its issuer revokes
it. Expiry is never written; it is recomputed from the clock on every
lookup. Revocation is written once and is final.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from ... import config
from ...errors import InternalError, InvalidArgumentError, NotFoundError, PermissionDeniedError
from ...shared.clock import Clock, SystemClock, as_utc
from ...shared.tokens import (
    SecretsTokenSource,
    TokenSource,
    generate_share_token,
    is_well_formed_share_token,
    token_hint,
)
from ..bookings.interfaces import BookingLookup
from .interfaces import ShareRecord, ShareStore, TokenCollisionError

logger = logging.getLogger(__name__)

MAX_TOKEN_ATTEMPTS = 5


@dataclass(frozen=True)
class IssuedShare:
    token: str
    expires_at: datetime


@dataclass(frozen=True)
class SharedBookingView:
    """Redacted booking details for an anonymous link holder"""

    stylist_name: str
    client_name: str
    service_title: str
    appointment_date: str
    appointment_time: str
    estimated_end_time: str
    starts_at: datetime
    ends_at: datetime
    approximate_location: Optional[str]
    status: str


@dataclass(frozen=True)
class RevokeResult:
    already_revoked: bool


def build_share_link(base_url: str, token: str) -> str:
    """Public URL for a share token"""
    return f"{base_url.rstrip('/')}/shared-booking/{token}"


def format_appointment_date(value: datetime, tz: ZoneInfo) -> str:
    """e.g. 'Saturday 14 March 2026'"""
    local = as_utc(value).astimezone(tz)
    return f"{local:%A} {local.day} {local:%B %Y}"


def format_clock_time(value: datetime, tz: ZoneInfo) -> str:
    """24-hour 'HH:MM'"""
    return f"{as_utc(value).astimezone(tz):%H:%M}"


class ShareTokenService:
    """Service layer for booking share links"""

    def __init__(
        self,
        store: ShareStore,
        bookings: BookingLookup,
        clock: Optional[Clock] = None,
        token_source: Optional[TokenSource] = None,
        default_ttl_hours: int = config.SHARE_DEFAULT_TTL_HOURS,
        min_ttl_hours: int = config.SHARE_MIN_TTL_HOURS,
        max_ttl_hours: int = config.SHARE_MAX_TTL_HOURS,
        display_timezone: str = config.DISPLAY_TIMEZONE,
    ):
        self.store = store
        self.bookings = bookings
        self.clock = clock or SystemClock()
        self.token_source = token_source or SecretsTokenSource()
        self.default_ttl_hours = default_ttl_hours
        self.min_ttl_hours = min_ttl_hours
        self.max_ttl_hours = max_ttl_hours
        self.display_tz = ZoneInfo(display_timezone)

    def resolve_ttl_hours(self, ttl_hours: Optional[int]) -> int:
        """Default a missing TTL, reject non-positive ones and cap long ones"""
        if ttl_hours is None:
            return self.default_ttl_hours
        if ttl_hours <= 0:
            raise InvalidArgumentError("expiresInHours must be a positive number of hours")
        if ttl_hours < self.min_ttl_hours:
            return self.min_ttl_hours
        if ttl_hours > self.max_ttl_hours:
            logger.info(f"Share TTL {ttl_hours}h capped to {self.max_ttl_hours}h")
            return self.max_ttl_hours
        return ttl_hours

    def issue(
        self,
        booking_id: int,
        issuer_id: str,
        recipient_name: str,
        recipient_email: Optional[str] = None,
        recipient_phone: Optional[str] = None,
        ttl_hours: Optional[int] = None,
    ) -> IssuedShare:
        """Mint a share link for a booking the issuer is party to"""
        parties = self.bookings.get_parties(booking_id)
        if not parties:
            raise NotFoundError("Booking not found")

        if not parties.involves(issuer_id):
            logger.warning(f"⚠️ User {issuer_id} tried to share booking {booking_id} they are not on")
            raise PermissionDeniedError("You can only share your own bookings")

        recipient_name = (recipient_name or "").strip()
        if not recipient_name:
            raise InvalidArgumentError("recipientName is required")

        ttl = self.resolve_ttl_hours(ttl_hours)
        expires_at = self.clock.now() + timedelta(hours=ttl)

        for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
            token = generate_share_token(self.token_source)
            try:
                self.store.add(
                    ShareRecord(
                        booking_id=booking_id,
                        token=token,
                        issued_by=issuer_id,
                        recipient_name=recipient_name,
                        recipient_email=recipient_email or None,
                        recipient_phone=recipient_phone or None,
                        expires_at=expires_at,
                    )
                )
            except TokenCollisionError:
                logger.warning(f"⚠️ Share token collision on attempt {attempt}/{MAX_TOKEN_ATTEMPTS}")
                continue

            logger.info(
                f"🔗 Share link {token_hint(token)} issued for booking {booking_id} "
                f"by {issuer_id}, expires {expires_at.isoformat()}"
            )
            return IssuedShare(token=token, expires_at=expires_at)

        logger.error(f"❌ Could not mint a unique share token for booking {booking_id}")
        raise InternalError("Could not create share link, please try again")

    def resolve(self, raw_token: str) -> SharedBookingView:
        """Open a share link: check it is live, record the visit, return the redacted view"""
        if not is_well_formed_share_token(raw_token):
            raise NotFoundError("Share link not found or invalid")

        share = self.store.get_by_token(raw_token)
        if not share:
            raise NotFoundError("Share link not found or invalid")

        # Revocation is an explicit owner action and wins over lapse
        if share.revoked:
            raise PermissionDeniedError("This share link has been revoked")

        now = self.clock.now()
        if share.is_expired(now):
            raise PermissionDeniedError("This share link has expired")

        details = self.bookings.get_shared_details(share.booking_id)
        if not details:
            logger.error(f"❌ Share {token_hint(raw_token)} points at missing booking {share.booking_id}")
            raise NotFoundError("Booking not found")

        try:
            self.store.record_access(raw_token, now)
        except Exception as e:
            logger.error(f"❌ Failed to record access for share {token_hint(raw_token)}: {e}")

        return SharedBookingView(
            stylist_name=details.stylist_name,
            client_name=details.client_name,
            service_title=details.service_title,
            appointment_date=format_appointment_date(details.starts_at, self.display_tz),
            appointment_time=format_clock_time(details.starts_at, self.display_tz),
            estimated_end_time=format_clock_time(details.ends_at, self.display_tz),
            starts_at=as_utc(details.starts_at),
            ends_at=as_utc(details.ends_at),
            approximate_location=details.approximate_location,
            status=details.status,
        )

    def revoke(self, booking_id: int, raw_token: str, requester_id: str) -> RevokeResult:
        """Invalidate a share link; only the user who issued it may do so"""
        share = self.store.get_for_booking(booking_id, raw_token)
        if not share:
            raise NotFoundError("Share not found")

        if share.issued_by != requester_id:
            logger.warning(
                f"⚠️ User {requester_id} tried to revoke share {token_hint(raw_token)} issued by {share.issued_by}"
            )
            raise PermissionDeniedError("You can only revoke your own shares")

        if share.revoked:
            return RevokeResult(already_revoked=True)

        changed = self.store.mark_revoked(raw_token, self.clock.now())
        if changed:
            logger.info(f"🚫 Share link {token_hint(raw_token)} revoked by {requester_id}")
        return RevokeResult(already_revoked=not changed)
