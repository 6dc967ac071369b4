import hashlib
import logging
from datetime import datetime, timezone

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import User, UserSession
from .shared.clock import as_utc

logger = logging.getLogger(__name__)

security = HTTPBearer()


def hash_session_token(token: str) -> str:
    """SHA-256 of a bearer token, as stored in user_sessions"""
    return hashlib.sha256(token.encode()).hexdigest()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token issued at login to the signed-in user"""
    session = (
        db.query(UserSession)
        .filter(UserSession.token_hash == hash_session_token(credentials.credentials))
        .first()
    )

    if not session:
        logger.warning("❌ Unknown session token")
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    if as_utc(session.expires_at) <= datetime.now(timezone.utc):
        logger.info(f"⏰ Session expired for user {session.user_id}")
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    user = db.query(User).filter(User.id == session.user_id).first()
    if not user:
        logger.error(f"❌ Session {session.id} points at missing user {session.user_id}")
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    return user
