from .interfaces import ShareRecord, ShareStore, TokenCollisionError
from .repository import InMemoryShareStore, SqlAlchemyShareStore
from .router import router
from .service import (
    IssuedShare,
    RevokeResult,
    SharedBookingView,
    ShareTokenService,
    build_share_link,
)

__all__ = [
    "router",
    "ShareRecord",
    "ShareStore",
    "TokenCollisionError",
    "InMemoryShareStore",
    "SqlAlchemyShareStore",
    "IssuedShare",
    "RevokeResult",
    "SharedBookingView",
    "ShareTokenService",
    "build_share_link",
]
