"""
Achievement and notification API routes.

Users see only their own achievements and notifications. Parents and
spouses may grant achievements to members of their family; granting
notifies the recipient.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, require_family_manager
from src.api.models import (
    AchievementResponse,
    CreateAchievementRequest,
    MessageResponse,
    NotificationResponse,
)
from src.database import get_db
from src.models import NotificationType, User
from src.services import (
    create_achievement,
    create_notification,
    get_notification,
    get_user,
    get_user_achievements,
    get_user_notifications,
    mark_notification_as_read,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["engagement"])


@router.get("/achievements", response_model=list[AchievementResponse])
def list_achievements(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[AchievementResponse]:
    """The caller's achievements, most recent first."""
    return [AchievementResponse.model_validate(a) for a in get_user_achievements(db, user.id)]


@router.post("/achievements", response_model=AchievementResponse, status_code=201)
def grant_achievement(
    request: CreateAchievementRequest,
    user: User = Depends(require_family_manager),
    db: Session = Depends(get_db),
) -> AchievementResponse:
    """Grant an achievement to a family member and notify them."""
    recipient = get_user(db, request.user_id)
    if recipient is None or recipient.family_id != user.family_id:
        raise HTTPException(status_code=404, detail="User not found")

    achievement = create_achievement(db, request.model_dump())
    create_notification(
        db,
        {
            "user_id": recipient.id,
            "title": "Achievement unlocked",
            "message": f"You earned '{achievement.name}'",
            "type": NotificationType.ACHIEVEMENT,
            "action_url": "/achievements",
        },
    )
    return AchievementResponse.model_validate(achievement)


@router.get("/notifications", response_model=list[NotificationResponse])
def list_notifications(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[NotificationResponse]:
    """The caller's notifications, newest first."""
    return [NotificationResponse.model_validate(n) for n in get_user_notifications(db, user.id)]


@router.put("/notifications/{notification_id}/read", response_model=MessageResponse)
def read_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    notification = get_notification(db, notification_id)
    if notification is None or notification.user_id != user.id:
        raise HTTPException(status_code=404, detail="Notification not found")

    mark_notification_as_read(db, notification_id)
    return MessageResponse(message="Notification marked as read")
