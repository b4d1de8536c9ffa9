"""
Unit tests for server-side session storage.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from src.auth import (
    create_session,
    delete_session,
    get_active_session,
    purge_expired_sessions,
)
from src.models import User, UserSession

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestSessions:
    """Test the session lifecycle."""

    def test_create_session(self, db_session: Session, parent_user: User):
        user_session = create_session(db_session, parent_user.id, timedelta(hours=1), now=NOW)

        assert len(user_session.sid) >= 32
        assert user_session.user_id == parent_user.id
        assert get_active_session(db_session, user_session.sid, now=NOW) is not None

    def test_session_ids_are_unique(self, db_session: Session, parent_user: User):
        a = create_session(db_session, parent_user.id, timedelta(hours=1))
        b = create_session(db_session, parent_user.id, timedelta(hours=1))
        assert a.sid != b.sid

    def test_expired_session_is_inactive(self, db_session: Session, parent_user: User):
        user_session = create_session(db_session, parent_user.id, timedelta(hours=1), now=NOW)

        later = NOW + timedelta(hours=1)
        assert get_active_session(db_session, user_session.sid, now=later) is None

    def test_unknown_session(self, db_session: Session):
        assert get_active_session(db_session, "nope") is None

    def test_delete_session(self, db_session: Session, parent_user: User):
        user_session = create_session(db_session, parent_user.id, timedelta(hours=1))

        assert delete_session(db_session, user_session.sid) is True
        assert delete_session(db_session, user_session.sid) is False

    def test_purge_expired(self, db_session: Session, parent_user: User):
        create_session(db_session, parent_user.id, timedelta(hours=1), now=NOW - timedelta(days=1))
        live = create_session(db_session, parent_user.id, timedelta(hours=1), now=NOW)

        assert purge_expired_sessions(db_session, now=NOW) == 1
        assert db_session.query(UserSession).one().sid == live.sid
