"""Share store interface (repository pattern).

Stores must be swappable and return domain records. Each write method is a
single atomic operation against the store; callers never read-modify-write.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...shared.clock import as_utc


@dataclass(frozen=True)
class ShareRecord:
    """Domain representation of a booking share link."""

    booking_id: int
    token: str
    issued_by: str
    recipient_name: str
    expires_at: datetime
    recipient_email: Optional[str] = None
    recipient_phone: Optional[str] = None
    revoked: bool = False
    revoked_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None
    access_count: int = 0

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) > as_utc(self.expires_at)


class TokenCollisionError(Exception):
    """Raised by a store when a new share's token is already taken."""


class ShareStore(ABC):
    """Interface for share link persistence."""

    @abstractmethod
    def add(self, share: ShareRecord) -> None:
        """Persist a new share.

        Raises:
            TokenCollisionError: If the token already exists.
        """
        ...

    @abstractmethod
    def get_by_token(self, token: str) -> Optional[ShareRecord]:
        """Return the share with exactly this token, or None."""
        ...

    @abstractmethod
    def get_for_booking(self, booking_id: int, token: str) -> Optional[ShareRecord]:
        """Return the share with this token only if it belongs to the booking."""
        ...

    @abstractmethod
    def record_access(self, token: str, accessed_at: datetime) -> None:
        """Atomically bump access_count by one and set last_accessed_at."""
        ...

    @abstractmethod
    def mark_revoked(self, token: str, revoked_at: datetime) -> bool:
        """Revoke the share. Returns False if it was already revoked."""
        ...
