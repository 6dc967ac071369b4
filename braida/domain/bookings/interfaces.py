"""Booking lookup interface (repository pattern).

The share service only ever sees these records, never ORM rows, so it cannot
leak private booking fields by accident.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BookingParties:
    """Who is allowed to act on a booking."""

    booking_id: int
    client_id: str
    freelancer_id: str

    def involves(self, user_id: str) -> bool:
        return user_id in (self.client_id, self.freelancer_id)


@dataclass(frozen=True)
class SharedBookingDetails:
    """The only booking fields an anonymous share-link holder may see."""

    stylist_name: str
    client_name: str
    service_title: str
    starts_at: datetime
    ends_at: datetime
    approximate_location: Optional[str]
    status: str


class BookingLookup(ABC):
    """Interface for reading bookings on behalf of the share service."""

    @abstractmethod
    def get_parties(self, booking_id: int) -> Optional[BookingParties]:
        """Return the client and freelancer of a booking, or None if not found."""
        ...

    @abstractmethod
    def get_shared_details(self, booking_id: int) -> Optional[SharedBookingDetails]:
        """Return the redacted booking projection, or None if not found."""
        ...
