"""
Achievement and notification storage operations.
"""

import logging
from typing import Any, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.models.engagement import Achievement, Notification

logger = logging.getLogger(__name__)


# =============================================================================
# Achievements
# =============================================================================


def create_achievement(session: Session, data: dict[str, Any]) -> Achievement:
    """
    Record an unlocked achievement.

    Granting an achievement does not change the user's point total;
    points_awarded is informational.
    """
    achievement = Achievement(**data)
    session.add(achievement)
    session.commit()
    session.refresh(achievement)
    logger.info(f"Achievement '{achievement.name}' unlocked for {achievement.user_id}")
    return achievement


def get_user_achievements(session: Session, user_id: str) -> Sequence[Achievement]:
    """Get a user's achievements, most recently unlocked first."""
    stmt = (
        select(Achievement)
        .where(Achievement.user_id == user_id)
        .order_by(Achievement.unlocked_at.desc(), Achievement.id.desc())
    )
    return session.scalars(stmt).all()


# =============================================================================
# Notifications
# =============================================================================


def create_notification(session: Session, data: dict[str, Any]) -> Notification:
    """Insert a notification for a user."""
    notification = Notification(**data)
    session.add(notification)
    session.commit()
    session.refresh(notification)
    return notification


def get_notification(session: Session, notification_id: int) -> Optional[Notification]:
    """Get a notification by id, or None."""
    return session.get(Notification, notification_id)


def get_user_notifications(session: Session, user_id: str) -> Sequence[Notification]:
    """Get a user's notifications, newest first."""
    stmt = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return session.scalars(stmt).all()


def mark_notification_as_read(session: Session, notification_id: int) -> Optional[Notification]:
    """
    Set is_read on a notification.

    Idempotent: marking an already-read notification is a no-op.

    Returns:
        The Notification, or None if not found
    """
    notification = session.get(Notification, notification_id)
    if notification is None:
        return None

    if not notification.is_read:
        notification.is_read = True
        session.commit()
        session.refresh(notification)
    return notification
