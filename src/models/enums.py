"""
Closed enumerations for roles, task workflow and event categories.

Every enumerated column stores the member's value string. Role-dependent
behavior is expressed as properties on Role so callers dispatch on the
member rather than comparing strings.
"""

from enum import Enum, IntEnum


class Role(str, Enum):
    """Role of a user within their family."""

    PARENT = "parent"
    SPOUSE = "spouse"
    CHILD = "child"

    @property
    def is_child(self) -> bool:
        """Children earn gamification points and get the child dashboard."""
        return self is Role.CHILD

    @property
    def can_manage_family(self) -> bool:
        """Adults may add members and grant achievements."""
        return self in (Role.PARENT, Role.SPOUSE)


class Quadrant(IntEnum):
    """Eisenhower matrix quadrant."""

    URGENT_IMPORTANT = 1
    IMPORTANT_NOT_URGENT = 2
    URGENT_NOT_IMPORTANT = 3
    NEITHER = 4

    @property
    def is_urgent(self) -> bool:
        return self in (Quadrant.URGENT_IMPORTANT, Quadrant.URGENT_NOT_IMPORTANT)

    @property
    def is_important(self) -> bool:
        return self in (Quadrant.URGENT_IMPORTANT, Quadrant.IMPORTANT_NOT_URGENT)


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class EventCategory(str, Enum):
    WORK = "work"
    SCHOOL = "school"
    SOCIAL = "social"
    HEALTHCARE = "healthcare"
    TRAVEL = "travel"
    OFFICIAL = "official"
    FAMILY = "family"
    SPORTS = "sports"


class NotificationType(str, Enum):
    TASK = "task"
    EVENT = "event"
    ACHIEVEMENT = "achievement"
    FAMILY = "family"


class AchievementType(str, Enum):
    BADGE = "badge"
    LEVEL = "level"
    MILESTONE = "milestone"
