"""
Family dashboard statistics.

Counters are derived from the family's task list on every request and
never persisted.
"""

from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.tasks import Task
from src.services.tasks import get_family_tasks
from src.timeutils import as_utc, day_bounds

DUE_SOON_WINDOW = timedelta(days=7)


@dataclass
class FamilyStats:
    """Dashboard counters for one family."""

    total_tasks: int
    completed_tasks: int
    completed_today: int
    due_this_week: int
    completion_rate: int

    def to_dict(self) -> dict:
        return asdict(self)


def percentage(part: int, whole: int) -> int:
    """Integer percentage rounded half-up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def compute_family_stats(tasks: Iterable[Task], now: datetime) -> FamilyStats:
    """
    Compute dashboard counters from a task collection.

    - completed_today: completed_at within [start of today, start of tomorrow)
      in now's timezone
    - due_this_week: not completed and due_date <= now + 7 days; overdue
      tasks count too
    - completion_rate: completed / total as a rounded percentage

    Args:
        tasks: The family's tasks
        now: Current time (aware; its timezone defines "today")

    Returns:
        FamilyStats
    """
    tasks = list(tasks)
    if now.tzinfo is None:
        now = as_utc(now)
    today_start, tomorrow_start = day_bounds(now)
    due_horizon = now + DUE_SOON_WINDOW

    completed = [t for t in tasks if t.is_completed]

    completed_today = sum(
        1
        for t in tasks
        if t.completed_at is not None
        and today_start <= as_utc(t.completed_at) < tomorrow_start
    )

    due_this_week = sum(
        1
        for t in tasks
        if t.due_date is not None
        and not t.is_completed
        and as_utc(t.due_date) <= due_horizon
    )

    return FamilyStats(
        total_tasks=len(tasks),
        completed_tasks=len(completed),
        completed_today=completed_today,
        due_this_week=due_this_week,
        completion_rate=percentage(len(completed), len(tasks)),
    )


def get_family_stats(
    session: Session,
    family_id: str,
    now: Optional[datetime] = None,
) -> FamilyStats:
    """
    Load a family's tasks and compute its dashboard counters.

    Args:
        session: Database session
        family_id: Family to summarize
        now: Current time (defaults to now in the configured family timezone)
    """
    if now is None:
        now = datetime.now(get_settings().tzinfo)
    return compute_family_stats(get_family_tasks(session, family_id), now)
