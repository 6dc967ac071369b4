"""Share repository - Database operations for booking share links"""

from dataclasses import replace
from datetime import datetime
from threading import Lock
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import BookingShare
from .interfaces import ShareRecord, ShareStore, TokenCollisionError


def _to_record(row: BookingShare) -> ShareRecord:
    return ShareRecord(
        booking_id=row.booking_id,
        token=row.share_code,
        issued_by=row.shared_by,
        recipient_name=row.recipient_name,
        recipient_email=row.recipient_email,
        recipient_phone=row.recipient_phone,
        expires_at=row.expires_at,
        revoked=row.is_revoked,
        revoked_at=row.revoked_at,
        last_accessed_at=row.last_accessed_at,
        access_count=row.access_count,
    )


class SqlAlchemyShareStore(ShareStore):
    """Share store on the booking_shares table; the unique index on share_code is authoritative"""

    def __init__(self, db: Session):
        self.db = db

    def _find(self, token: str) -> Optional[BookingShare]:
        return self.db.query(BookingShare).filter(BookingShare.share_code == token).first()

    def add(self, share: ShareRecord) -> None:
        self.db.add(
            BookingShare(
                booking_id=share.booking_id,
                share_code=share.token,
                shared_by=share.issued_by,
                recipient_name=share.recipient_name,
                recipient_email=share.recipient_email,
                recipient_phone=share.recipient_phone,
                expires_at=share.expires_at,
                is_revoked=False,
                access_count=0,
            )
        )
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self._find(share.token) is not None:
                raise TokenCollisionError() from None
            raise

    def get_by_token(self, token: str) -> Optional[ShareRecord]:
        row = self._find(token)
        return _to_record(row) if row else None

    def get_for_booking(self, booking_id: int, token: str) -> Optional[ShareRecord]:
        row = (
            self.db.query(BookingShare)
            .filter(BookingShare.booking_id == booking_id, BookingShare.share_code == token)
            .first()
        )
        return _to_record(row) if row else None

    def record_access(self, token: str, accessed_at: datetime) -> None:
        # Single UPDATE so concurrent resolutions cannot lose increments
        try:
            self.db.query(BookingShare).filter(BookingShare.share_code == token).update(
                {
                    BookingShare.access_count: BookingShare.access_count + 1,
                    BookingShare.last_accessed_at: accessed_at,
                },
                synchronize_session=False,
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def mark_revoked(self, token: str, revoked_at: datetime) -> bool:
        try:
            updated = (
                self.db.query(BookingShare)
                .filter(BookingShare.share_code == token, BookingShare.is_revoked.is_(False))
                .update(
                    {BookingShare.is_revoked: True, BookingShare.revoked_at: revoked_at},
                    synchronize_session=False,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return updated == 1


class InMemoryShareStore(ShareStore):
    """Process-local share store; every operation holds one lock"""

    def __init__(self):
        self._shares: dict[str, ShareRecord] = {}
        self._lock = Lock()

    def add(self, share: ShareRecord) -> None:
        with self._lock:
            if share.token in self._shares:
                raise TokenCollisionError()
            self._shares[share.token] = share

    def get_by_token(self, token: str) -> Optional[ShareRecord]:
        with self._lock:
            return self._shares.get(token)

    def get_for_booking(self, booking_id: int, token: str) -> Optional[ShareRecord]:
        with self._lock:
            share = self._shares.get(token)
        if share and share.booking_id == booking_id:
            return share
        return None

    def record_access(self, token: str, accessed_at: datetime) -> None:
        with self._lock:
            share = self._shares.get(token)
            if share:
                self._shares[token] = replace(
                    share, access_count=share.access_count + 1, last_accessed_at=accessed_at
                )

    def mark_revoked(self, token: str, revoked_at: datetime) -> bool:
        with self._lock:
            share = self._shares.get(token)
            if not share or share.revoked:
                return False
            self._shares[token] = replace(share, revoked=True, revoked_at=revoked_at)
            return True
