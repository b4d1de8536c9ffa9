"""
Service layer for Family Hub.

Provides data access and business logic for:
- Users and families (membership, upsert on login)
- Tasks (Eisenhower quadrants, completion with point awards)
- Events (family calendar, attendee and date-range queries)
- Achievements and notifications
- Family dashboard statistics
- Display derivations (matrix, calendar buckets, levels, role display)
"""

from src.services.exceptions import (
    FamilyHubError,
    MembershipRequiredError,
    PermissionDeniedError,
)

from src.services.users import (
    get_user,
    upsert_user,
    update_user,
    create_family,
    get_family,
    get_family_members,
    add_family_member,
)

from src.services.tasks import (
    create_task,
    get_task,
    update_task,
    delete_task,
    get_family_tasks,
    get_user_tasks,
    get_tasks_by_quadrant,
    complete_task,
    award_points,
)

from src.services.events import (
    create_event,
    get_event,
    update_event,
    delete_event,
    get_family_events,
    get_user_events,
    get_events_for_date_range,
    get_events_starting_in_range,
)

from src.services.engagement import (
    create_achievement,
    get_user_achievements,
    create_notification,
    get_notification,
    get_user_notifications,
    mark_notification_as_read,
)

from src.services.stats import (
    FamilyStats,
    compute_family_stats,
    get_family_stats,
)

__all__ = [
    # Exceptions
    "FamilyHubError",
    "MembershipRequiredError",
    "PermissionDeniedError",
    # Users and families
    "get_user",
    "upsert_user",
    "update_user",
    "create_family",
    "get_family",
    "get_family_members",
    "add_family_member",
    # Tasks
    "create_task",
    "get_task",
    "update_task",
    "delete_task",
    "get_family_tasks",
    "get_user_tasks",
    "get_tasks_by_quadrant",
    "complete_task",
    "award_points",
    # Events
    "create_event",
    "get_event",
    "update_event",
    "delete_event",
    "get_family_events",
    "get_user_events",
    "get_events_for_date_range",
    "get_events_starting_in_range",
    # Engagement
    "create_achievement",
    "get_user_achievements",
    "create_notification",
    "get_notification",
    "get_user_notifications",
    "mark_notification_as_read",
    # Statistics
    "FamilyStats",
    "compute_family_stats",
    "get_family_stats",
]
