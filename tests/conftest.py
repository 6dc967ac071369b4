"""Pytest configuration and shared fixtures."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

import pytest  # noqa: E402
from fastapi import HTTPException, Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from braida.auth import get_current_user  # noqa: E402
from braida.database import Base, get_db  # noqa: E402
from braida.models import Booking, FreelancerProfile, Service, User  # noqa: E402
from fakes import BOOKING_END, BOOKING_START  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db) -> dict:
    """One confirmed booking between a client and a freelancer, plus an outsider."""
    client = User(
        id="client-1",
        email="amara@example.com",
        first_name="Amara",
        last_name="Okafor",
        phone="+447700900123",
    )
    freelancer = User(
        id="freelancer-1",
        email="zee@example.com",
        first_name="Zainab",
        last_name="Bello",
        phone="+447700900456",
    )
    stranger = User(id="stranger-1", email="stranger@example.com", first_name="Sam")
    db.add_all([client, freelancer, stranger])
    db.flush()

    db.add(
        FreelancerProfile(
            user_id=freelancer.id,
            display_name="Braids by Zee",
            location_area="Peckham, London",
        )
    )
    service = Service(
        freelancer_id=freelancer.id,
        title="Knotless braids",
        base_price_pence=10000,
        duration_minutes=240,
    )
    db.add(service)
    db.flush()

    booking = Booking(
        client_id=client.id,
        freelancer_id=freelancer.id,
        service_id=service.id,
        start_datetime=BOOKING_START,
        end_datetime=BOOKING_END,
        status="confirmed",
        address_line="12 Rye Lane, Flat 3",
        postcode="SE15 4ST",
        total_price_pence=11790,
        payment_status="paid",
        stripe_payment_intent_id="pi_3Nprivate",
    )
    db.add(booking)
    db.commit()

    return {
        "booking_id": booking.id,
        "client_id": client.id,
        "freelancer_id": freelancer.id,
        "stranger_id": stranger.id,
        "service_id": service.id,
    }


@pytest.fixture
def app(db):
    from braida.domain.shares.router import shared_booking_rate_limit
    from braida.main import app

    def override_get_db():
        yield db

    def override_current_user(request: Request) -> User:
        user_id = request.headers.get("X-Test-User")
        user = db.get(User, user_id) if user_id else None
        if not user:
            raise HTTPException(status_code=401, detail="Invalid or expired session")
        return user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_current_user
    app.dependency_overrides[shared_booking_rate_limit] = lambda: None
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(app) -> TestClient:
    return TestClient(app)
