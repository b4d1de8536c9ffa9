"""
Task storage operations.

Provides CRUD plus the family/assignee/quadrant query shapes and the
completion transition, which is the one operation that touches two
entities: it may award the task's points to a child.
"""

import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from src.models.enums import Role, TaskStatus
from src.models.family import User
from src.models.tasks import Task
from src.timeutils import as_utc, utcnow

logger = logging.getLogger(__name__)

# Columns never changed through update_task
IMMUTABLE_FIELDS = frozenset({"id", "family_id", "created_by", "created_at", "completed_at"})

DATETIME_FIELDS = ("due_date",)


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    values = dict(data)
    for field in DATETIME_FIELDS:
        if values.get(field) is not None:
            values[field] = as_utc(values[field])
    return values


# =============================================================================
# CRUD
# =============================================================================


def create_task(session: Session, data: dict[str, Any]) -> Task:
    """
    Insert a task.

    Args:
        session: Database session
        data: Column values (family_id and created_by required)

    Returns:
        The persisted Task
    """
    task = Task(**_normalize(data))
    session.add(task)
    session.commit()
    session.refresh(task)
    logger.info(f"Created task {task.id} in family {task.family_id} (quadrant {task.quadrant})")
    return task


def get_task(session: Session, task_id: int) -> Optional[Task]:
    """Get a task by id, or None."""
    return session.get(Task, task_id)


def update_task(
    session: Session,
    task_id: int,
    updates: dict[str, Any],
    acting_user_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[Task]:
    """
    Apply a partial update to a task.

    A status change to completed goes through complete_task so that
    completed_at is set and points are awarded. Moving a completed task
    back to another status clears completed_at.

    Args:
        session: Database session
        task_id: Task to update
        updates: Field values to change (unknown or immutable fields ignored)
        acting_user_id: User making the change (point recipient fallback)
        now: Override for the completion timestamp

    Returns:
        Updated Task, or None if not found
    """
    task = session.get(Task, task_id)
    if task is None:
        return None

    values = _normalize(updates)
    new_status = values.pop("status", None)

    for field, value in values.items():
        if field in IMMUTABLE_FIELDS or field not in Task.__table__.columns:
            continue
        setattr(task, field, value)

    if new_status is not None:
        new_status = TaskStatus(new_status)
        if new_status == TaskStatus.COMPLETED:
            if not task.is_completed:
                session.flush()
                return complete_task(
                    session, task_id, acting_user_id or task.created_by, now=now
                )
        else:
            task.status = new_status
            task.completed_at = None

    session.commit()
    session.refresh(task)
    return task


def delete_task(session: Session, task_id: int) -> bool:
    """
    Hard-delete a task.

    Returns:
        True if deleted, False if not found
    """
    task = session.get(Task, task_id)
    if task is None:
        return False

    session.delete(task)
    session.commit()
    logger.info(f"Deleted task {task_id}")
    return True


# =============================================================================
# Queries
# =============================================================================


def get_family_tasks(session: Session, family_id: str) -> Sequence[Task]:
    """
    Get all tasks of a family, newest first.

    Args:
        session: Database session
        family_id: Family to query

    Returns:
        Tasks ordered by creation time descending
    """
    stmt = (
        select(Task)
        .where(Task.family_id == family_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    return session.scalars(stmt).all()


def get_user_tasks(session: Session, user_id: str) -> Sequence[Task]:
    """Get all tasks assigned to a user, newest first."""
    stmt = (
        select(Task)
        .where(Task.assignee_id == user_id)
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    return session.scalars(stmt).all()


def get_tasks_by_quadrant(session: Session, family_id: str, quadrant: int) -> Sequence[Task]:
    """Get a family's tasks in one Eisenhower quadrant, newest first."""
    stmt = (
        select(Task)
        .where(
            Task.family_id == family_id,
            Task.quadrant == quadrant,
        )
        .order_by(Task.created_at.desc(), Task.id.desc())
    )
    return session.scalars(stmt).all()


# =============================================================================
# Completion
# =============================================================================


def complete_task(
    session: Session,
    task_id: int,
    user_id: str,
    now: Optional[datetime] = None,
) -> Optional[Task]:
    """
    Mark a task completed and award its points.

    The status transition is a conditional UPDATE (status != completed),
    so of several concurrent completions only one succeeds and only that
    one awards points. Completing an already-completed task returns it
    unchanged.

    Points go to the assignee, or to the completing user when the task
    is unassigned, and only if that user is a child.

    Args:
        session: Database session
        task_id: Task to complete
        user_id: User completing the task
        now: Override for completed_at (defaults to current UTC time)

    Returns:
        The updated Task, or None if not found
    """
    task = session.get(Task, task_id)
    if task is None:
        return None
    if task.is_completed:
        return task

    completed_at = as_utc(now) if now else utcnow()
    result = session.execute(
        update(Task)
        .where(
            Task.id == task_id,
            Task.status != TaskStatus.COMPLETED,
        )
        .values(
            status=TaskStatus.COMPLETED,
            completed_at=completed_at,
            updated_at=completed_at,
        )
        .execution_options(synchronize_session=False)
    )

    if result.rowcount == 1:
        logger.info(f"Task {task_id} completed by {user_id}")
        if task.points > 0:
            award_points(session, task.assignee_id or user_id, task.points)

    session.commit()
    session.refresh(task)
    return task


def award_points(session: Session, user_id: str, points: int) -> bool:
    """
    Atomically add points to a child's total.

    The increment is computed by the database (points = points + n) and
    the role check is part of the same statement.

    Returns:
        True if a child row was updated
    """
    result = session.execute(
        update(User)
        .where(
            User.id == user_id,
            User.role == Role.CHILD,
        )
        .values(gamification_points=User.gamification_points + points)
        .execution_options(synchronize_session=False)
    )
    awarded = result.rowcount == 1
    if awarded:
        logger.info(f"Awarded {points} points to {user_id}")
    return awarded
