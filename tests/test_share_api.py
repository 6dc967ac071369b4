"""API tests for the booking share endpoints.

Run with: pytest tests/test_share_api.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from braida import config
from braida.domain.bookings import SqlAlchemyBookingLookup
from braida.domain.shares import ShareTokenService, SqlAlchemyShareStore
from braida.domain.shares.router import get_share_service
from braida.shared.tokens import SHARE_TOKEN_PATTERN
from fakes import FrozenClock, as_user

PUBLIC_FIELDS = {
    "stylistName",
    "clientName",
    "serviceTitle",
    "appointmentDate",
    "appointmentTime",
    "estimatedEndTime",
    "startsAt",
    "endsAt",
    "approximateLocation",
    "status",
}


def share(client, seeded, user_key="client_id", **payload):
    body = {"recipientName": "Mum", **payload}
    return client.post(
        f"/bookings/{seeded['booking_id']}/share",
        json=body,
        headers=as_user(seeded[user_key]),
    )


def revoke(client, seeded, code, user_key="client_id"):
    return client.post(
        f"/bookings/{seeded['booking_id']}/share/revoke",
        json={"shareCode": code},
        headers=as_user(seeded[user_key]),
    )


class TestShareBooking:
    """Tests for POST /bookings/{booking_id}/share."""

    def test_client_creates_link(self, api_client, seeded):
        response = share(api_client, seeded)

        assert response.status_code == 200
        body = response.json()
        assert SHARE_TOKEN_PATTERN.fullmatch(body["shareCode"])
        assert body["shareLink"] == f"{config.APP_URL}/shared-booking/{body['shareCode']}"
        expires_at = datetime.fromisoformat(body["expiresAt"].replace("Z", "+00:00"))
        assert timedelta(hours=47) < expires_at - datetime.now(timezone.utc) <= timedelta(hours=48)

    def test_freelancer_creates_link(self, api_client, seeded):
        assert share(api_client, seeded, user_key="freelancer_id").status_code == 200

    def test_outsider_forbidden(self, api_client, seeded):
        response = share(api_client, seeded, user_key="stranger_id")

        assert response.status_code == 403
        assert response.json() == {
            "code": "PERMISSION_DENIED",
            "detail": "You can only share your own bookings",
        }

    def test_unknown_booking(self, api_client, seeded):
        response = api_client.post(
            "/bookings/9999/share", json={"recipientName": "Mum"}, headers=as_user(seeded["client_id"])
        )
        assert response.status_code == 404

    def test_blank_recipient_rejected(self, api_client, seeded):
        response = share(api_client, seeded, recipientName="  ")

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"

    def test_zero_ttl_rejected(self, api_client, seeded):
        assert share(api_client, seeded, expiresInHours=0).status_code == 400

    def test_requires_authentication(self, api_client, seeded):
        response = api_client.post(f"/bookings/{seeded['booking_id']}/share", json={"recipientName": "Mum"})
        assert response.status_code == 401


class TestSharedBooking:
    """Tests for GET /shared-booking/{share_code}."""

    def test_anonymous_view(self, api_client, seeded):
        code = share(api_client, seeded).json()["shareCode"]

        response = api_client.get(f"/shared-booking/{code}")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == PUBLIC_FIELDS
        assert body["stylistName"] == "Braids by Zee"
        assert body["clientName"] == "Amara Okafor"
        assert body["serviceTitle"] == "Knotless braids"
        assert body["appointmentDate"] == "Saturday 17 January 2026"
        assert body["appointmentTime"] == "10:30"
        assert body["estimatedEndTime"] == "14:30"
        assert body["approximateLocation"] == "Peckham, London"
        assert body["status"] == "confirmed"

    def test_private_booking_fields_never_exposed(self, api_client, seeded):
        code = share(api_client, seeded, recipientEmail="mum@example.com").json()["shareCode"]

        text = api_client.get(f"/shared-booking/{code}").text

        for private in (
            "12 Rye Lane",
            "SE15",
            "+447700900123",
            "amara@example.com",
            "mum@example.com",
            "pi_3Nprivate",
            "11790",
            "paid",
        ):
            assert private not in text

    def test_security_headers(self, api_client, seeded):
        code = share(api_client, seeded).json()["shareCode"]

        response = api_client.get(f"/shared-booking/{code}")

        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert "no-store" in response.headers["Cache-Control"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"

    def test_malformed_code(self, api_client, seeded):
        response = api_client.get("/shared-booking/not-a-real-code")

        assert response.status_code == 404
        assert response.json() == {"code": "NOT_FOUND", "detail": "Share link not found or invalid"}

    def test_unknown_code(self, api_client, seeded):
        assert api_client.get(f"/shared-booking/{'0' * 32}").status_code == 404

    def test_visits_are_counted(self, api_client, seeded, db):
        code = share(api_client, seeded).json()["shareCode"]

        for _ in range(3):
            api_client.get(f"/shared-booking/{code}")

        db.expire_all()
        assert SqlAlchemyShareStore(db).get_by_token(code).access_count == 3


class TestExpiredShareApi:
    """Expiry through the API, with the clock under test control."""

    @pytest.fixture
    def clock(self, app, db):
        clock = FrozenClock(datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc))
        app.dependency_overrides[get_share_service] = lambda: ShareTokenService(
            SqlAlchemyShareStore(db), SqlAlchemyBookingLookup(db), clock=clock
        )
        return clock

    def test_expired_link_forbidden(self, api_client, seeded, clock):
        code = share(api_client, seeded, expiresInHours=2).json()["shareCode"]
        clock.advance(hours=3)

        response = api_client.get(f"/shared-booking/{code}")

        assert response.status_code == 403
        assert response.json()["detail"] == "This share link has expired"

    def test_revoked_wins_over_expired(self, api_client, seeded, clock):
        code = share(api_client, seeded, expiresInHours=2).json()["shareCode"]
        revoke(api_client, seeded, code)
        clock.advance(hours=3)

        response = api_client.get(f"/shared-booking/{code}")

        assert response.status_code == 403
        assert response.json()["detail"] == "This share link has been revoked"


class TestRevokeShare:
    """Tests for POST /bookings/{booking_id}/share/revoke."""

    def test_issuer_revokes(self, api_client, seeded):
        code = share(api_client, seeded).json()["shareCode"]

        response = revoke(api_client, seeded, code)

        assert response.status_code == 200
        assert response.json() == {"success": True, "alreadyRevoked": False}
        assert api_client.get(f"/shared-booking/{code}").status_code == 403

    def test_second_revoke_reports_already_revoked(self, api_client, seeded):
        code = share(api_client, seeded).json()["shareCode"]
        revoke(api_client, seeded, code)

        response = revoke(api_client, seeded, code)

        assert response.status_code == 200
        assert response.json() == {"success": True, "alreadyRevoked": True}

    def test_other_party_cannot_revoke(self, api_client, seeded):
        code = share(api_client, seeded).json()["shareCode"]

        response = revoke(api_client, seeded, code, user_key="freelancer_id")

        assert response.status_code == 403
        assert api_client.get(f"/shared-booking/{code}").status_code == 200

    def test_unknown_code(self, api_client, seeded):
        response = revoke(api_client, seeded, "ab" * 16)

        assert response.status_code == 404
        assert response.json()["detail"] == "Share not found"
