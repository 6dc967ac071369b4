from .interfaces import BookingLookup, BookingParties, SharedBookingDetails
from .repository import BookingRepository, SqlAlchemyBookingLookup

__all__ = [
    "BookingLookup",
    "BookingParties",
    "SharedBookingDetails",
    "BookingRepository",
    "SqlAlchemyBookingLookup",
]
