"""Cancellation service - refund amounts from a tiered notice policy"""

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from ...errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from ...models import User
from ...shared.clock import Clock, SystemClock, as_utc
from ...shared.money import apply_percentage
from ..bookings.repository import BookingRepository
from .repository import CancellationPolicyRepository
from .schemas import CancellationPolicyTier, RefundCalculation

logger = logging.getLogger(__name__)

FREELANCER_FULL_REFUND_POLICY = "freelancer_cancel_full_refund"
NO_REFUND_POLICY = "no_refund"
NON_CANCELLABLE_STATUSES = {"cancelled", "completed"}


def order_tiers(tiers: Iterable[CancellationPolicyTier]) -> list[CancellationPolicyTier]:
    """Longest notice first; tiers sharing a threshold keep their given order"""
    ordered = sorted(tiers, key=lambda tier: tier.hours_threshold, reverse=True)

    for previous, current in zip(ordered, ordered[1:]):
        if previous.hours_threshold == current.hours_threshold:
            logger.warning(
                f"⚠️ Cancellation policy has duplicate {current.hours_threshold}h tiers - "
                f"using {previous.refund_percentage}%, ignoring {current.refund_percentage}%"
            )

    return ordered


def select_tier(
    hours_until_booking: Union[int, float], tiers: Iterable[CancellationPolicyTier]
) -> Optional[CancellationPolicyTier]:
    """First tier whose threshold the notice period meets, or None"""
    for tier in order_tiers(tiers):
        if tier.hours_threshold <= hours_until_booking:
            return tier
    return None


def compute_refund_amount(
    total_paid: int,
    hours_until_booking: Union[int, float],
    tiers: Iterable[CancellationPolicyTier],
) -> int:
    """Refund in pence for a client cancellation made ``hours_until_booking`` ahead"""
    tier = select_tier(hours_until_booking, tiers)
    if tier is None:
        return 0
    return apply_percentage(total_paid, tier.refund_percentage)


def hours_before(scheduled_start: datetime, cancelled_at: datetime) -> int:
    """Whole hours of notice, rounded down (negative once the booking has started)"""
    delta = as_utc(scheduled_start) - as_utc(cancelled_at)
    return math.floor(delta.total_seconds() / 3600)


def calculate_refund(
    amount_paid: int,
    scheduled_start: datetime,
    cancelled_at: datetime,
    cancelled_by: str,
    tiers: Sequence[CancellationPolicyTier],
) -> RefundCalculation:
    """Work out the refund for a cancellation by either party.

    A freelancer cancelling always refunds the client in full; the policy
    tiers only ever apply to client cancellations.
    """
    hours_before_service = hours_before(scheduled_start, cancelled_at)

    if cancelled_by == "freelancer":
        return RefundCalculation(
            refund_percentage=100,
            refund_amount=amount_paid,
            hours_before_service=hours_before_service,
            applied_policy=FREELANCER_FULL_REFUND_POLICY,
        )

    tier = select_tier(hours_before_service, tiers)
    if tier is None:
        return RefundCalculation(
            refund_percentage=0,
            refund_amount=0,
            hours_before_service=hours_before_service,
            applied_policy=NO_REFUND_POLICY,
        )

    return RefundCalculation(
        refund_percentage=tier.refund_percentage,
        refund_amount=apply_percentage(amount_paid, tier.refund_percentage),
        hours_before_service=hours_before_service,
        applied_policy=tier.label,
    )


class CancellationService:
    """Service layer for refund previews on stored bookings"""

    def __init__(self, db: Session, clock: Optional[Clock] = None):
        self.db = db
        self.clock = clock or SystemClock()
        self.booking_repo = BookingRepository()
        self.policy_repo = CancellationPolicyRepository()

    def quote_refund(self, booking_id: int, user: User) -> tuple[str, RefundCalculation]:
        """Refund the booking would get if ``user`` cancelled it now"""
        booking = self.booking_repo.get_booking_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundError("Booking not found")

        if user.id not in (booking.client_id, booking.freelancer_id):
            raise PermissionDeniedError("You can only cancel your own bookings")

        if booking.status in NON_CANCELLABLE_STATUSES:
            raise InvalidArgumentError(f"Booking is {booking.status} and cannot be cancelled")

        cancelled_by = "client" if booking.client_id == user.id else "freelancer"
        tiers = self.policy_repo.get_client_cancel_tiers(self.db)

        calculation = calculate_refund(
            booking.total_price_pence,
            booking.start_datetime,
            self.clock.now(),
            cancelled_by,
            tiers,
        )
        logger.info(
            f"💷 Refund quote for booking {booking_id} ({cancelled_by}): "
            f"{calculation.refund_percentage}% via {calculation.applied_policy}"
        )
        return cancelled_by, calculation
