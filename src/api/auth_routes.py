"""
Authentication API routes.

Handles the cookie session lifecycle:
1. POST /api/auth/login - Upsert the user profile and open a session
2. POST /api/auth/logout - Close the session and clear the cookie
3. GET /api/auth/user - Current user profile
4. PUT /api/auth/user - Update own profile

The login endpoint trusts the profile it is given; in deployments it sits
behind the identity provider and is disabled with DEV_LOGIN_ENABLED=false.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.api.models import (
    LoginRequest,
    MessageResponse,
    UpdateProfileRequest,
    UserResponse,
)
from src.auth import create_session, delete_session
from src.config import get_settings
from src.database import get_db
from src.models import User
from src.services import update_user, upsert_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])


@router.post("/login", response_model=UserResponse)
def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Sign in: upsert the user and set the session cookie.

    Returns 404 when local sign-in is disabled.
    """
    settings = get_settings()
    if not settings.dev_login_enabled:
        raise HTTPException(status_code=404, detail="Not found")

    user = upsert_user(db, request.model_dump(exclude_unset=True))
    ttl = timedelta(hours=settings.session_ttl_hours)
    user_session = create_session(db, user.id, ttl)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=user_session.sid,
        max_age=int(ttl.total_seconds()),
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    logger.info(f"User {user.id} signed in")
    return UserResponse.model_validate(user)


@router.post("/logout", response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Close the current session and clear the cookie."""
    settings = get_settings()
    delete_session(db, request.cookies[settings.session_cookie_name])
    response.delete_cookie(settings.session_cookie_name)
    logger.info(f"User {user.id} signed out")
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
def get_current_profile(user: User = Depends(get_current_user)) -> UserResponse:
    """Current user profile with gamification level."""
    return UserResponse.model_validate(user)


@router.put("/user", response_model=UserResponse)
def update_current_profile(
    request: UpdateProfileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserResponse:
    """Update the signed-in user's own profile."""
    updated = update_user(db, user.id, request.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.model_validate(updated)
