"""
FastAPI dependency injection providers.

Provides the authenticated user, family membership checks and the
family timezone.
"""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from src.auth import get_active_session
from src.config import get_settings
from src.database import get_db
from src.models import User
from src.services import (
    MembershipRequiredError,
    PermissionDeniedError,
    get_user,
)

logger = logging.getLogger(__name__)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the signed-in user from the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing, unknown or expired,
            or the user no longer exists
    """
    sid = request.cookies.get(get_settings().session_cookie_name)
    if not sid:
        raise HTTPException(status_code=401, detail="Unauthorized")

    user_session = get_active_session(db, sid)
    if user_session is None:
        raise HTTPException(status_code=401, detail="Session expired")

    user = get_user(db, user_session.user_id)
    if user is None:
        logger.warning(f"Session {sid[:8]}... refers to missing user {user_session.user_id}")
        raise HTTPException(status_code=401, detail="Unauthorized")

    return user


def require_family(user: User = Depends(get_current_user)) -> User:
    """
    The current user, who must belong to a family.

    Raises:
        MembershipRequiredError: If the user has not joined a family
    """
    if not user.family_id:
        raise MembershipRequiredError("User must belong to a family")
    return user


def require_family_manager(user: User = Depends(require_family)) -> User:
    """
    The current user, who must be allowed to manage their family.

    Raises:
        PermissionDeniedError: If the user's role cannot manage the family
    """
    if not user.role.can_manage_family:
        raise PermissionDeniedError("Only parents and spouses can do this")
    return user


def ensure_family_access(user: User, family_id: str) -> None:
    """
    Check that a user belongs to the family named in the path.

    Raises:
        HTTPException: 403 for any other family
    """
    if user.family_id != family_id:
        raise HTTPException(status_code=403, detail="Access denied")


def get_timezone() -> ZoneInfo:
    """Family timezone used for day and calendar boundaries."""
    return get_settings().tzinfo


def get_now(tz: ZoneInfo = Depends(get_timezone)) -> datetime:
    """Current time in the family timezone."""
    return datetime.now(tz)
