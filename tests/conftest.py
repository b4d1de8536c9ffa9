"""
Pytest configuration and fixtures for Family Hub tests.

Provides database session fixtures, sample data and logged-in API clients.
"""

import os

# Settings are read once at import; point the app at a throwaway database
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("TIMEZONE", "UTC")

from datetime import date, datetime, timedelta, timezone
from typing import Callable, Generator

import pytest
import sqlalchemy as sa
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from src.api.main import app
from src.database import get_db
from src.models import (
    Base,
    Event,
    EventCategory,
    Family,
    Role,
    Task,
    TaskStatus,
    User,
)
from src.services import add_family_member, create_family


# Configure SQLite to enforce foreign key constraints in tests
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    """Enable foreign key constraints for SQLite connections."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a clean database session for each test.

    Uses an in-memory SQLite database that is torn down after each test.
    StaticPool keeps one connection so TestClient worker threads see the
    same database.

    Yields:
        Session: SQLAlchemy session for database operations
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()
        # Disable foreign key constraints for drop operations
        with engine.begin() as connection:
            connection.execute(sa.text("PRAGMA foreign_keys=OFF"))
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


# =============================================================================
# Sample data
# =============================================================================


def _add_user(db_session: Session, **values) -> User:
    user = User(**values)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def parent_user(db_session: Session) -> User:
    """A signed-up user who has not created a family yet."""
    return _add_user(
        db_session,
        id="parent-1",
        email="pat@example.com",
        first_name="Pat",
        last_name="Smith",
    )


@pytest.fixture
def sample_family(db_session: Session, parent_user: User) -> Family:
    """
    The Smith family, created by parent_user.

    Returns:
        Family: parent_user is its parent member
    """
    return create_family(db_session, "The Smiths", parent_user.id)


@pytest.fixture
def spouse_user(db_session: Session, sample_family: Family) -> User:
    user = _add_user(db_session, id="spouse-1", email="sam@example.com", first_name="Sam")
    return add_family_member(db_session, sample_family.id, user.id, Role.SPOUSE)


@pytest.fixture
def child_user(db_session: Session, sample_family: Family) -> User:
    """A child member (born 2015-06-01) with no points yet."""
    user = _add_user(
        db_session,
        id="child-1",
        email="kid@example.com",
        first_name="Kim",
        date_of_birth=date(2015, 6, 1),
    )
    return add_family_member(db_session, sample_family.id, user.id, Role.CHILD)


@pytest.fixture
def other_family_user(db_session: Session) -> User:
    """A parent of an unrelated family."""
    user = _add_user(db_session, id="other-1", email="oz@example.com", first_name="Oz")
    create_family(db_session, "The Joneses", user.id)
    db_session.refresh(user)
    return user


@pytest.fixture
def sample_task(db_session: Session, parent_user: User, child_user: User, sample_family: Family) -> Task:
    """A 20-point chore assigned to the child."""
    task = Task(
        title="Take out the trash",
        quadrant=1,
        status=TaskStatus.NOT_STARTED,
        assignee_id=child_user.id,
        created_by=parent_user.id,
        family_id=sample_family.id,
        due_date=datetime.now(timezone.utc) + timedelta(days=1),
        points=20,
    )
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task


@pytest.fixture
def sample_event(db_session: Session, parent_user: User, child_user: User, sample_family: Family) -> Event:
    """Soccer practice on 2024-01-10 09:00-10:00 UTC attended by the child."""
    event = Event(
        title="Soccer practice",
        start_time=datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc),
        end_time=datetime(2024, 1, 10, 10, 0, tzinfo=timezone.utc),
        category=EventCategory.SPORTS,
        attendees=[child_user.id],
        created_by=parent_user.id,
        family_id=sample_family.id,
    )
    db_session.add(event)
    db_session.commit()
    db_session.refresh(event)
    return event


# =============================================================================
# API clients
# =============================================================================


@pytest.fixture
def make_client(db_session: Session) -> Generator[Callable[[User], TestClient], None, None]:
    """
    Factory for TestClients signed in as a given user.

    All clients share db_session through the get_db override.
    """

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    clients: list[TestClient] = []

    def _make(user: User | None = None) -> TestClient:
        client = TestClient(app)
        if user is not None:
            response = client.post("/api/auth/login", json={"id": user.id})
            assert response.status_code == 200
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(make_client) -> TestClient:
    """Client without a session cookie."""
    return make_client()


@pytest.fixture
def parent_client(make_client, parent_user: User, sample_family: Family) -> TestClient:
    return make_client(parent_user)


@pytest.fixture
def child_client(make_client, child_user: User) -> TestClient:
    return make_client(child_user)
