"""
Unit tests for the Task model.

Tests:
- Task creation and defaults
- Quadrant and points check constraints
- Foreign keys to users and families
- JSON extras and derived properties
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy.exc import IntegrityError, StatementError
from sqlalchemy.orm import Session

from src.models import Family, Quadrant, Task, TaskPriority, TaskStatus, User


def _task(family: Family, user: User, **overrides) -> Task:
    values = dict(title="Dishes", quadrant=2, created_by=user.id, family_id=family.id)
    values.update(overrides)
    return Task(**values)


class TestTask:
    """Test Task model functionality."""

    def test_create_task_defaults(self, db_session: Session, sample_family: Family, parent_user: User):
        task = _task(sample_family, parent_user)
        db_session.add(task)
        db_session.commit()
        db_session.refresh(task)

        assert task.id is not None
        assert task.status == TaskStatus.NOT_STARTED
        assert task.priority == TaskPriority.MEDIUM
        assert task.points == 0
        assert task.is_recurring is False
        assert task.completed_at is None
        assert task.assignee_id is None

    @pytest.mark.parametrize("quadrant", [0, 5])
    def test_quadrant_out_of_range(self, db_session: Session, sample_family: Family, parent_user: User, quadrant):
        db_session.add(_task(sample_family, parent_user, quadrant=quadrant))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_negative_points_rejected(self, db_session: Session, sample_family: Family, parent_user: User):
        db_session.add(_task(sample_family, parent_user, points=-5))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_family_must_exist(self, db_session: Session, parent_user: User):
        db_session.add(Task(title="Orphan", quadrant=1, created_by=parent_user.id, family_id="missing"))
        with pytest.raises(IntegrityError):
            db_session.commit()

    def test_unknown_status_rejected(self, db_session: Session, sample_family: Family, parent_user: User):
        db_session.add(_task(sample_family, parent_user, status="done"))
        with pytest.raises(StatementError):
            db_session.commit()

    def test_json_extras(self, db_session: Session, sample_family: Family, parent_user: User):
        task = _task(
            sample_family,
            parent_user,
            tags=["chores", "kitchen"],
            subtasks=[{"title": "Load", "done": False}],
            recurring_pattern={"freq": "weekly"},
        )
        db_session.add(task)
        db_session.commit()
        db_session.expire_all()

        stored = db_session.get(Task, task.id)
        assert stored.tags == ["chores", "kitchen"]
        assert stored.subtasks[0]["title"] == "Load"
        assert stored.recurring_pattern == {"freq": "weekly"}

    def test_relationships(self, db_session: Session, sample_task: Task):
        assert sample_task.assignee.id == "child-1"
        assert sample_task.creator.id == "parent-1"
        assert sample_task.family.name == "The Smiths"


class TestTaskProperties:
    """Derived task properties."""

    def test_is_completed(self):
        assert Task(status=TaskStatus.COMPLETED).is_completed is True
        assert Task(status=TaskStatus.BLOCKED).is_completed is False

    def test_quadrant_kind(self):
        task = Task(quadrant=3)
        assert task.quadrant_kind == Quadrant.URGENT_NOT_IMPORTANT
        assert task.quadrant_kind.is_urgent is True
        assert task.quadrant_kind.is_important is False

    def test_due_date_round_trip_is_utc(self, db_session: Session, sample_family: Family, parent_user: User):
        due = datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc)
        task = _task(sample_family, parent_user, due_date=due)
        db_session.add(task)
        db_session.commit()
        db_session.expire_all()

        stored = db_session.get(Task, task.id).due_date
        assert stored.replace(tzinfo=timezone.utc) == due
