"""Tests for the tiered cancellation refund policy.

Run with: pytest tests/test_cancellations.py -v
"""

import logging
from datetime import timedelta

import pytest
from pydantic import ValidationError

from braida.domain.cancellations import (
    DEFAULT_CLIENT_CANCEL_TIERS,
    CancellationPolicyTier,
    CancellationService,
    calculate_refund,
    compute_refund_amount,
    get_cancellation_service,
    hours_before,
    order_tiers,
)
from braida.domain.cancellations.repository import CancellationPolicyRepository
from braida.errors import InvalidArgumentError, NotFoundError, PermissionDeniedError
from braida.models import Booking, CancellationPolicy, User
from fakes import BOOKING_START, FrozenClock, as_user


def tier(hours: int, percentage: int) -> CancellationPolicyTier:
    return CancellationPolicyTier(hours_threshold=hours, refund_percentage=percentage)


STANDARD_TIERS = [tier(48, 100), tier(24, 50), tier(0, 0)]


class TestComputeRefundAmount:
    """Tests for compute_refund_amount."""

    @pytest.mark.parametrize(
        "hours,expected",
        [
            (72, 10000),
            (48, 10000),
            (47.9, 5000),
            (30, 5000),
            (24, 5000),
            (23.99, 0),
            (10, 0),
            (0, 0),
        ],
    )
    def test_standard_policy(self, hours, expected):
        assert compute_refund_amount(10000, hours, STANDARD_TIERS) == expected

    def test_refund_never_shrinks_with_more_notice(self):
        refunds = [compute_refund_amount(10000, hours, STANDARD_TIERS) for hours in range(0, 100)]
        assert refunds == sorted(refunds)

    def test_tier_order_in_input_does_not_matter(self):
        shuffled = [tier(0, 0), tier(48, 100), tier(24, 50)]
        for hours in (5, 30, 60):
            assert compute_refund_amount(10000, hours, shuffled) == compute_refund_amount(
                10000, hours, STANDARD_TIERS
            )

    def test_no_matching_tier_refunds_nothing(self):
        assert compute_refund_amount(10000, 10, [tier(24, 50)]) == 0

    def test_empty_policy_refunds_nothing(self):
        assert compute_refund_amount(10000, 500, []) == 0

    def test_zero_threshold_tier_always_applies(self):
        assert compute_refund_amount(10000, 0, [tier(24, 100), tier(0, 25)]) == 2500

    def test_refund_rounds_to_whole_pence(self):
        assert compute_refund_amount(999, 30, STANDARD_TIERS) == 500

    def test_duplicate_thresholds_keep_first_and_warn(self, caplog):
        with caplog.at_level(logging.WARNING):
            amount = compute_refund_amount(10000, 30, [tier(24, 50), tier(24, 75)])

        assert amount == 5000
        assert "duplicate 24h tiers" in caplog.text

    def test_order_tiers_descending(self):
        ordered = order_tiers([tier(0, 0), tier(72, 100), tier(24, 50)])
        assert [t.hours_threshold for t in ordered] == [72, 24, 0]


class TestCalculateRefund:
    """Tests for calculate_refund."""

    def test_client_with_long_notice_gets_full_refund(self):
        result = calculate_refund(
            11790, BOOKING_START, BOOKING_START - timedelta(hours=72), "client", STANDARD_TIERS
        )

        assert result.refund_percentage == 100
        assert result.refund_amount == 11790
        assert result.hours_before_service == 72
        assert result.applied_policy == "client_cancel_48h_100pct"

    def test_client_partial_refund(self):
        result = calculate_refund(
            11790, BOOKING_START, BOOKING_START - timedelta(hours=30), "client", STANDARD_TIERS
        )

        assert result.refund_percentage == 50
        assert result.refund_amount == 5895
        assert result.applied_policy == "client_cancel_24h_50pct"

    def test_hours_are_rounded_down(self):
        """47h59m of notice is 47 whole hours, which misses the 48h tier."""
        cancelled_at = BOOKING_START - timedelta(hours=47, minutes=59)
        result = calculate_refund(10000, BOOKING_START, cancelled_at, "client", STANDARD_TIERS)

        assert result.hours_before_service == 47
        assert result.refund_percentage == 50

    def test_freelancer_cancellation_always_refunds_in_full(self):
        cancelled_at = BOOKING_START - timedelta(hours=2)
        result = calculate_refund(11790, BOOKING_START, cancelled_at, "freelancer", STANDARD_TIERS)

        assert result.refund_percentage == 100
        assert result.refund_amount == 11790
        assert result.applied_policy == "freelancer_cancel_full_refund"

    def test_cancelling_after_start_refunds_nothing(self):
        cancelled_at = BOOKING_START + timedelta(minutes=30)
        result = calculate_refund(11790, BOOKING_START, cancelled_at, "client", STANDARD_TIERS)

        assert result.hours_before_service == -1
        assert result.refund_amount == 0
        assert result.applied_policy == "no_refund"

    def test_naive_start_treated_as_utc(self):
        naive_start = BOOKING_START.replace(tzinfo=None)
        assert hours_before(naive_start, BOOKING_START - timedelta(hours=5)) == 5


class TestCancellationPolicyTier:
    """Tests for tier validation."""

    @pytest.mark.parametrize("hours,percentage", [(-1, 50), (24, -5), (24, 101)])
    def test_rejects_invalid_tiers(self, hours, percentage):
        with pytest.raises(ValidationError):
            tier(hours, percentage)


class TestCancellationPolicyRepository:
    """Tests for loading tiers from the database."""

    def test_falls_back_to_defaults(self, db):
        tiers = CancellationPolicyRepository.get_client_cancel_tiers(db)
        assert tiers == list(DEFAULT_CLIENT_CANCEL_TIERS)

    def test_loads_configured_tiers(self, db):
        db.add_all(
            [
                CancellationPolicy(policy_type="client_cancel", hours_threshold=24, refund_percentage=75),
                CancellationPolicy(policy_type="client_cancel", hours_threshold=72, refund_percentage=100),
                CancellationPolicy(policy_type="other", hours_threshold=1, refund_percentage=1),
            ]
        )
        db.commit()

        tiers = CancellationPolicyRepository.get_client_cancel_tiers(db)

        assert tiers == [tier(72, 100), tier(24, 75)]


class TestCancellationService:
    """Tests for CancellationService.quote_refund."""

    def service(self, db, hours_ahead: int) -> CancellationService:
        return CancellationService(db, clock=FrozenClock(BOOKING_START - timedelta(hours=hours_ahead)))

    def test_client_quote(self, db, seeded):
        client = db.get(User, seeded["client_id"])
        cancelled_by, calculation = self.service(db, 30).quote_refund(seeded["booking_id"], client)

        assert cancelled_by == "client"
        assert calculation.refund_amount == 5895

    def test_freelancer_quote(self, db, seeded):
        freelancer = db.get(User, seeded["freelancer_id"])
        cancelled_by, calculation = self.service(db, 1).quote_refund(seeded["booking_id"], freelancer)

        assert cancelled_by == "freelancer"
        assert calculation.refund_amount == 11790

    def test_outsider_rejected(self, db, seeded):
        stranger = db.get(User, seeded["stranger_id"])
        with pytest.raises(PermissionDeniedError):
            self.service(db, 30).quote_refund(seeded["booking_id"], stranger)

    def test_missing_booking(self, db, seeded):
        client = db.get(User, seeded["client_id"])
        with pytest.raises(NotFoundError):
            self.service(db, 30).quote_refund(9999, client)

    def test_cancelled_booking_rejected(self, db, seeded):
        booking = db.get(Booking, seeded["booking_id"])
        booking.status = "cancelled"
        db.commit()

        client = db.get(User, seeded["client_id"])
        with pytest.raises(InvalidArgumentError):
            self.service(db, 30).quote_refund(seeded["booking_id"], client)


class TestRefundQuoteApi:
    """Tests for GET /bookings/{booking_id}/refund-quote."""

    @pytest.fixture
    def quote_client(self, app, api_client, db):
        clock = FrozenClock(BOOKING_START - timedelta(hours=30))
        app.dependency_overrides[get_cancellation_service] = lambda: CancellationService(db, clock=clock)
        return api_client

    def test_client_sees_partial_refund(self, quote_client, seeded):
        response = quote_client.get(
            f"/bookings/{seeded['booking_id']}/refund-quote", headers=as_user(seeded["client_id"])
        )

        assert response.status_code == 200
        body = response.json()
        assert body["cancelledBy"] == "client"
        assert body["refundPercentage"] == 50
        assert body["refundAmount"] == 5895
        assert body["refundAmountFormatted"] == "£58.95"
        assert body["hoursBeforeService"] == 30
        assert body["appliedPolicy"] == "client_cancel_24h_50pct"

    def test_outsider_gets_403(self, quote_client, seeded):
        response = quote_client.get(
            f"/bookings/{seeded['booking_id']}/refund-quote", headers=as_user(seeded["stranger_id"])
        )

        assert response.status_code == 403
        assert response.json()["code"] == "PERMISSION_DENIED"

    def test_unknown_booking_gets_404(self, quote_client, seeded):
        response = quote_client.get("/bookings/9999/refund-quote", headers=as_user(seeded["client_id"]))

        assert response.status_code == 404

    def test_requires_authentication(self, quote_client, seeded):
        response = quote_client.get(f"/bookings/{seeded['booking_id']}/refund-quote")

        assert response.status_code == 401
