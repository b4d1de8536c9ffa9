"""
Display-time derivations for dashboards, the task matrix and calendars.

Everything here is a pure function of already-loaded rows and the current
time: nothing is persisted and nothing touches the database.

Provides:
- Quadrant bucketing for the Eisenhower matrix
- Calendar bucketing by day (month view) or day+hour (week/day views)
- Gamification level and progress
- Today's tasks and progress, upcoming events
- Role display variants (tags for adults, badges for children)
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterable, Literal, Optional, Sequence

from src.models.enums import Quadrant, Role
from src.models.events import Event
from src.models.family import User
from src.models.tasks import Task
from src.services.stats import percentage
from src.timeutils import as_utc, day_bounds, local_date

POINTS_PER_LEVEL = 100

CalendarView = Literal["month", "week", "day"]


# =============================================================================
# Gamification
# =============================================================================


def level_for_points(points: int) -> int:
    """Level 1 at 0-99 points, level 2 at 100-199, and so on."""
    return points // POINTS_PER_LEVEL + 1


def progress_to_next_level(points: int) -> int:
    """Percent of the way through the current level (0-99)."""
    return points % POINTS_PER_LEVEL


def points_to_next_level(points: int) -> int:
    return POINTS_PER_LEVEL - progress_to_next_level(points)


# =============================================================================
# Task matrix
# =============================================================================


def bucket_by_quadrant(tasks: Iterable[Task]) -> dict[int, list[Task]]:
    """
    Partition tasks into the four Eisenhower quadrants.

    All four keys are always present; input order is kept within a bucket.
    """
    buckets: dict[int, list[Task]] = {q.value: [] for q in Quadrant}
    for task in tasks:
        buckets[task.quadrant].append(task)
    return buckets


@dataclass
class TaskProgress:
    completed: int
    total: int
    percentage: int


def tasks_due_today(tasks: Iterable[Task], now: datetime) -> list[Task]:
    """
    Tasks due within today, plus tasks with no due date.

    Undated tasks are treated as due today.
    """
    start, end = day_bounds(now)
    return [
        task
        for task in tasks
        if task.due_date is None or start <= as_utc(task.due_date) < end
    ]


def today_progress(tasks: Iterable[Task], now: datetime) -> TaskProgress:
    """
    Completion progress over tasks with a due date today.

    Unlike tasks_due_today, undated tasks are not counted.
    """
    start, end = day_bounds(now)
    due_today = [
        task
        for task in tasks
        if task.due_date is not None and start <= as_utc(task.due_date) < end
    ]
    done = sum(1 for task in due_today if task.is_completed)
    return TaskProgress(completed=done, total=len(due_today), percentage=percentage(done, len(due_today)))


# =============================================================================
# Calendar
# =============================================================================


def _start_of_week(day: date) -> date:
    # Weeks start on Sunday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def calendar_range(view: CalendarView, anchor: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """
    Inclusive datetime range covered by a calendar view.

    - month: whole weeks from the Sunday on/before the 1st to the
      Saturday on/after the last day of the month
    - week: Sunday through Saturday containing anchor
    - day: anchor only
    """
    if view == "month":
        first = anchor.replace(day=1)
        next_month = (first + timedelta(days=32)).replace(day=1)
        last = next_month - timedelta(days=1)
        first_day = _start_of_week(first)
        last_day = _start_of_week(last) + timedelta(days=6)
    elif view == "week":
        first_day = _start_of_week(anchor)
        last_day = first_day + timedelta(days=6)
    elif view == "day":
        first_day = last_day = anchor
    else:
        raise ValueError(f"Unknown calendar view: {view}")

    return (
        datetime.combine(first_day, time.min, tzinfo=tz),
        datetime.combine(last_day, time.max, tzinfo=tz),
    )


def bucket_events_by_day(events: Iterable[Event], tz: tzinfo) -> dict[date, list[Event]]:
    """Group events by the calendar day of their start time."""
    buckets: dict[date, list[Event]] = {}
    for event in sorted(events, key=lambda e: as_utc(e.start_time)):
        buckets.setdefault(local_date(event.start_time, tz), []).append(event)
    return buckets


def bucket_events_by_hour(events: Iterable[Event], tz: tzinfo) -> dict[tuple[date, int], list[Event]]:
    """Group events by (day, hour) of their start time."""
    buckets: dict[tuple[date, int], list[Event]] = {}
    for event in sorted(events, key=lambda e: as_utc(e.start_time)):
        start = as_utc(event.start_time).astimezone(tz)
        buckets.setdefault((start.date(), start.hour), []).append(event)
    return buckets


def upcoming_events(
    events: Iterable[Event],
    now: datetime,
    days: int = 7,
    limit: int = 3,
) -> list[Event]:
    """The next few events starting between now and now + days."""
    horizon = now + timedelta(days=days)
    upcoming = [e for e in events if now <= as_utc(e.start_time) <= horizon]
    upcoming.sort(key=lambda e: as_utc(e.start_time))
    return upcoming[:limit]


# =============================================================================
# Member cards
# =============================================================================


@dataclass(frozen=True)
class DisplayTag:
    label: str
    color: str


@dataclass
class RoleDisplay:
    """How a member's role is presented: adults get tags, children badges."""

    label: str
    tags: list[DisplayTag] = field(default_factory=list)
    badges: list[DisplayTag] = field(default_factory=list)


_ROLE_LABELS = {
    Role.PARENT: "Parent (Admin)",
    Role.SPOUSE: "Spouse",
    Role.CHILD: "Child",
}

_ROLE_TAGS = {
    Role.PARENT: [DisplayTag("Work", "blue"), DisplayTag("Home", "green")],
    Role.SPOUSE: [DisplayTag("Health", "purple"), DisplayTag("School", "yellow")],
    Role.CHILD: [],
}

_ROLE_BADGES = {
    Role.PARENT: [],
    Role.SPOUSE: [],
    Role.CHILD: [
        DisplayTag("Star Kid", "yellow"),
        DisplayTag("Studious", "blue"),
        DisplayTag("Helper", "green"),
    ],
}


def age_on(date_of_birth: date, today: date) -> int:
    had_birthday = (today.month, today.day) >= (date_of_birth.month, date_of_birth.day)
    return today.year - date_of_birth.year - (0 if had_birthday else 1)


def role_display(role: Role, date_of_birth: Optional[date], today: date) -> RoleDisplay:
    """
    Map a role to its display variant.

    Children show their age in the label when a birth date is known.
    """
    label = _ROLE_LABELS[role]
    if role.is_child and date_of_birth is not None:
        label = f"{label} ({age_on(date_of_birth, today)} years)"
    return RoleDisplay(
        label=label,
        tags=list(_ROLE_TAGS[role]),
        badges=list(_ROLE_BADGES[role]),
    )


@dataclass
class MemberCard:
    user: User
    level: int
    level_progress: int
    today: TaskProgress
    display: RoleDisplay


def build_member_card(user: User, assigned_tasks: Sequence[Task], now: datetime) -> MemberCard:
    """Assemble the dashboard card for one family member."""
    points = user.gamification_points or 0
    return MemberCard(
        user=user,
        level=level_for_points(points),
        level_progress=progress_to_next_level(points),
        today=today_progress(assigned_tasks, now),
        display=role_display(user.role, user.date_of_birth, now.date()),
    )
