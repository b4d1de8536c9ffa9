"""
Server-side session storage.

Sessions are rows in the sessions table keyed by a random id that the
browser carries in a cookie. Expired sessions are ignored on lookup and
removed by purge_expired_sessions.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from src.models.sessions import UserSession
from src.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)


def create_session(
    session: Session,
    user_id: str,
    ttl: timedelta,
    now: Optional[datetime] = None,
) -> UserSession:
    """
    Open a new session for a user.

    Args:
        session: Database session
        user_id: Signed-in user
        ttl: Session lifetime
        now: Override for the current time

    Returns:
        The stored UserSession (its sid goes in the cookie)
    """
    now = as_utc(now) if now else utcnow()
    user_session = UserSession(
        sid=secrets.token_urlsafe(32),
        sess={"user_id": user_id, "created_at": now.isoformat()},
        expire=now + ttl,
    )
    session.add(user_session)
    session.commit()
    logger.info(f"Opened session for user {user_id}")
    return user_session


def get_active_session(
    session: Session,
    sid: str,
    now: Optional[datetime] = None,
) -> Optional[UserSession]:
    """
    Look up a session that has not expired.

    Returns:
        UserSession, or None if unknown or expired
    """
    user_session = session.get(UserSession, sid)
    if user_session is None:
        return None

    now = as_utc(now) if now else utcnow()
    if as_utc(user_session.expire) <= now:
        return None
    return user_session


def delete_session(session: Session, sid: str) -> bool:
    """
    Remove a session (logout).

    Returns:
        True if a session was removed
    """
    user_session = session.get(UserSession, sid)
    if user_session is None:
        return False

    session.delete(user_session)
    session.commit()
    logger.info(f"Closed session for user {user_session.user_id}")
    return True


def purge_expired_sessions(session: Session, now: Optional[datetime] = None) -> int:
    """
    Delete all expired sessions.

    Returns:
        Number of sessions removed
    """
    now = as_utc(now) if now else utcnow()
    result = session.execute(
        delete(UserSession).where(UserSession.expire <= now)
    )
    session.commit()
    if result.rowcount:
        logger.info(f"Purged {result.rowcount} expired sessions")
    return result.rowcount
