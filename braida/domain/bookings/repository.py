"""Booking repository - Database operations for bookings"""

from typing import Optional

from sqlalchemy.orm import Session, aliased

from ...models import Booking, FreelancerProfile, Service, User
from .interfaces import BookingLookup, BookingParties, SharedBookingDetails


class BookingRepository:
    """Repository for booking database operations"""

    @staticmethod
    def get_booking_by_id(db: Session, booking_id: int) -> Optional[Booking]:
        """Get a booking by ID"""
        return db.query(Booking).filter(Booking.id == booking_id).first()


class SqlAlchemyBookingLookup(BookingLookup):
    """Booking lookup backed by the bookings, services and profiles tables"""

    def __init__(self, db: Session):
        self.db = db

    def get_parties(self, booking_id: int) -> Optional[BookingParties]:
        row = (
            self.db.query(Booking.id, Booking.client_id, Booking.freelancer_id)
            .filter(Booking.id == booking_id)
            .first()
        )
        if not row:
            return None
        return BookingParties(booking_id=row.id, client_id=row.client_id, freelancer_id=row.freelancer_id)

    def get_shared_details(self, booking_id: int) -> Optional[SharedBookingDetails]:
        client = aliased(User)
        row = (
            self.db.query(
                Service.title.label("service_title"),
                FreelancerProfile.display_name.label("freelancer_name"),
                FreelancerProfile.location_area.label("freelancer_area"),
                client.first_name.label("client_first_name"),
                client.last_name.label("client_last_name"),
                Booking.start_datetime,
                Booking.end_datetime,
                Booking.status,
            )
            .select_from(Booking)
            .join(Service, Booking.service_id == Service.id)
            .join(client, Booking.client_id == client.id)
            .join(FreelancerProfile, Booking.freelancer_id == FreelancerProfile.user_id)
            .filter(Booking.id == booking_id)
            .first()
        )
        if not row:
            return None

        client_name = " ".join(
            part for part in (row.client_first_name, row.client_last_name) if part
        )
        return SharedBookingDetails(
            stylist_name=row.freelancer_name,
            client_name=client_name,
            service_title=row.service_title,
            starts_at=row.start_datetime,
            ends_at=row.end_datetime,
            approximate_location=row.freelancer_area,
            status=row.status,
        )
