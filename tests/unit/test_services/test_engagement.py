"""
Unit tests for achievement and notification services.
"""

from sqlalchemy.orm import Session

from src.models import AchievementType, NotificationType, User
from src.services import (
    create_achievement,
    create_notification,
    get_notification,
    get_user_achievements,
    get_user_notifications,
    mark_notification_as_read,
)


def _notify(db_session: Session, user: User, title: str):
    return create_notification(
        db_session,
        {"user_id": user.id, "title": title, "message": "...", "type": NotificationType.TASK},
    )


class TestAchievements:
    """Test achievement services."""

    def test_create_and_list(self, db_session: Session, child_user: User):
        first = create_achievement(
            db_session, {"user_id": child_user.id, "type": AchievementType.BADGE, "name": "Helper"}
        )
        second = create_achievement(
            db_session,
            {"user_id": child_user.id, "type": AchievementType.MILESTONE, "name": "10 chores", "points_awarded": 10},
        )

        achievements = get_user_achievements(db_session, child_user.id)

        assert [a.id for a in achievements] == [second.id, first.id]

    def test_granting_does_not_change_points(self, db_session: Session, child_user: User):
        create_achievement(
            db_session,
            {"user_id": child_user.id, "type": AchievementType.LEVEL, "name": "Level 2", "points_awarded": 50},
        )
        db_session.refresh(child_user)

        assert child_user.gamification_points == 0

    def test_other_users_achievements_excluded(self, db_session: Session, child_user: User, parent_user: User):
        create_achievement(db_session, {"user_id": child_user.id, "type": AchievementType.BADGE, "name": "Star"})

        assert list(get_user_achievements(db_session, parent_user.id)) == []


class TestNotifications:
    """Test notification services."""

    def test_create_and_list_newest_first(self, db_session: Session, parent_user: User):
        older = _notify(db_session, parent_user, "Older")
        newer = _notify(db_session, parent_user, "Newer")

        notifications = get_user_notifications(db_session, parent_user.id)

        assert [n.id for n in notifications] == [newer.id, older.id]
        assert all(n.is_read is False for n in notifications)

    def test_mark_as_read(self, db_session: Session, parent_user: User):
        notification = _notify(db_session, parent_user, "Hello")

        updated = mark_notification_as_read(db_session, notification.id)

        assert updated.is_read is True
        assert get_notification(db_session, notification.id).is_read is True

    def test_mark_as_read_is_idempotent(self, db_session: Session, parent_user: User):
        notification = _notify(db_session, parent_user, "Hello")

        mark_notification_as_read(db_session, notification.id)
        again = mark_notification_as_read(db_session, notification.id)

        assert again.is_read is True

    def test_mark_missing_notification(self, db_session: Session):
        assert mark_notification_as_read(db_session, 999) is None
