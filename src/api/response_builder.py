"""
Response builder utilities for transforming service results to API responses.

Turns ORM rows and display derivations (member cards, quadrant buckets,
calendar buckets) into the response models in src.api.models.
"""

from datetime import date, datetime
from typing import Any, Sequence

from src.api.models import (
    CalendarBucket,
    CalendarResponse,
    DisplayTagResponse,
    EventResponse,
    MemberOverviewResponse,
    TaskMatrixResponse,
    TaskProgressResponse,
    TaskResponse,
    TodayTasksResponse,
    UserResponse,
)
from src.models import Event, Task
from src.services.display import (
    CalendarView,
    MemberCard,
    TaskProgress,
    bucket_by_quadrant,
    bucket_events_by_day,
    bucket_events_by_hour,
    points_to_next_level,
)


def build_progress(progress: TaskProgress) -> TaskProgressResponse:
    return TaskProgressResponse(
        completed=progress.completed,
        total=progress.total,
        percentage=progress.percentage,
    )


def build_member_overview(card: MemberCard) -> MemberOverviewResponse:
    """Build a member overview from a member card."""
    points = card.user.gamification_points or 0
    return MemberOverviewResponse(
        user=UserResponse.model_validate(card.user),
        level=card.level,
        level_progress=card.level_progress,
        points_to_next_level=points_to_next_level(points),
        today=build_progress(card.today),
        role_label=card.display.label,
        tags=[DisplayTagResponse.model_validate(t) for t in card.display.tags],
        badges=[DisplayTagResponse.model_validate(b) for b in card.display.badges],
    )


def build_task_matrix(tasks: Sequence[Task]) -> TaskMatrixResponse:
    """Bucket tasks into the Eisenhower matrix."""
    buckets = bucket_by_quadrant(tasks)
    return TaskMatrixResponse(
        quadrants={
            quadrant: [TaskResponse.model_validate(t) for t in bucket]
            for quadrant, bucket in buckets.items()
        },
        counts={quadrant: len(bucket) for quadrant, bucket in buckets.items()},
    )


def build_today_tasks(tasks: Sequence[Task], progress: TaskProgress) -> TodayTasksResponse:
    return TodayTasksResponse(
        tasks=[TaskResponse.model_validate(t) for t in tasks],
        progress=build_progress(progress),
    )


def build_calendar(
    view: CalendarView,
    start: datetime,
    end: datetime,
    events: Sequence[Event],
) -> CalendarResponse:
    """
    Build a calendar response.

    Month view buckets by day; week and day views bucket by day and hour.
    Buckets are ordered chronologically and empty slots are omitted.
    """
    tz = start.tzinfo
    buckets: list[CalendarBucket] = []

    if view == "month":
        by_day: dict[date, list[Event]] = bucket_events_by_day(events, tz)
        for day in sorted(by_day):
            buckets.append(
                CalendarBucket(
                    date=day,
                    events=[EventResponse.model_validate(e) for e in by_day[day]],
                )
            )
    else:
        by_hour = bucket_events_by_hour(events, tz)
        for day, hour in sorted(by_hour):
            buckets.append(
                CalendarBucket(
                    date=day,
                    hour=hour,
                    events=[EventResponse.model_validate(e) for e in by_hour[(day, hour)]],
                )
            )

    return CalendarResponse(view=view, start=start, end=end, buckets=buckets)


def build_error_response(
    error_type: str,
    message: str,
    details: Any = None,
    retryable: bool = False,
) -> dict[str, Any]:
    """Build standardized error response dictionary."""
    return {
        "error_type": error_type,
        "message": message,
        "details": details,
        "retryable": retryable,
    }
