"""
Pydantic request and response models for the Family Hub API.

Request models validate bodies before anything is written; response
models serialize ORM rows (from_attributes) with datetimes as UTC.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from src.models.enums import (
    AchievementType,
    EventCategory,
    NotificationType,
    Role,
    TaskPriority,
    TaskStatus,
)
from src.services.display import level_for_points, progress_to_next_level
from src.timeutils import as_utc

# Naive datetimes (from clients or SQLite) are read as UTC
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]

HexColor = Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]


def _strip_not_empty(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not v.strip():
        raise ValueError("Value cannot be empty")
    return v.strip()


def _reject_nulls(data: Any, fields: tuple[str, ...]) -> Any:
    if isinstance(data, dict):
        nulls = [f for f in fields if f in data and data[f] is None]
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
    return data


# =============================================================================
# Auth / User Requests
# =============================================================================


class LoginRequest(BaseModel):
    """Profile asserted by the identity provider at sign-in."""

    id: str = Field(..., min_length=1, max_length=255, description="Identity provider subject id")
    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        return _strip_not_empty(v)


class UpdateProfileRequest(BaseModel):
    """Fields a user may change on their own profile."""

    email: Optional[str] = Field(None, max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_image_url: Optional[str] = Field(None, max_length=500)
    date_of_birth: Optional[date] = None
    preferences: Optional[dict[str, Any]] = None


# =============================================================================
# Family Requests
# =============================================================================


class CreateFamilyRequest(BaseModel):
    """Request to create a family."""

    name: str = Field(..., min_length=1, max_length=100, examples=["The Smiths"])

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _strip_not_empty(v)


class AddMemberRequest(BaseModel):
    """Request to add an existing user to a family."""

    user_id: str = Field(..., min_length=1)
    role: Role = Field(default=Role.CHILD)


# =============================================================================
# Task Requests
# =============================================================================


class CreateTaskRequest(BaseModel):
    """Request to create a task. created_by and family_id come from the session."""

    title: str = Field(..., min_length=1, max_length=500, examples=["Take out the trash"])
    description: Optional[str] = None
    quadrant: int = Field(..., ge=1, le=4, description="Eisenhower quadrant 1-4")
    status: TaskStatus = TaskStatus.NOT_STARTED
    priority: TaskPriority = TaskPriority.MEDIUM
    assignee_id: Optional[str] = Field(None, description="Defaults to the creator")
    due_date: Optional[UTCDateTime] = None
    points: int = Field(default=0, ge=0)
    is_recurring: bool = False
    recurring_pattern: Optional[dict[str, Any]] = None
    attachments: Optional[list[Any]] = None
    subtasks: Optional[list[Any]] = None
    tags: Optional[list[str]] = None
    estimated_duration: Optional[int] = Field(None, ge=0, description="Minutes")
    actual_duration: Optional[int] = Field(None, ge=0, description="Minutes")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_not_empty(v)

    @field_validator("status")
    @classmethod
    def validate_initial_status(cls, v: TaskStatus) -> TaskStatus:
        if v == TaskStatus.COMPLETED:
            raise ValueError("Tasks are completed after creation, not created completed")
        return v


class UpdateTaskRequest(BaseModel):
    """Partial task update; only fields present in the body are applied."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    quadrant: Optional[int] = Field(None, ge=1, le=4)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[str] = None
    due_date: Optional[UTCDateTime] = None
    points: Optional[int] = Field(None, ge=0)
    is_recurring: Optional[bool] = None
    recurring_pattern: Optional[dict[str, Any]] = None
    attachments: Optional[list[Any]] = None
    subtasks: Optional[list[Any]] = None
    tags: Optional[list[str]] = None
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def validate_required_not_null(cls, data: Any) -> Any:
        return _reject_nulls(
            data, ("title", "quadrant", "status", "priority", "points", "is_recurring")
        )


# =============================================================================
# Event Requests
# =============================================================================


class CreateEventRequest(BaseModel):
    """Request to create an event. created_by and family_id come from the session."""

    title: str = Field(..., min_length=1, max_length=500, examples=["Soccer practice"])
    description: Optional[str] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    location: Optional[str] = None
    category: EventCategory
    attendees: list[str] = Field(default_factory=list, description="Attending user ids")
    is_recurring: bool = False
    recurring_pattern: Optional[dict[str, Any]] = None
    reminders: Optional[list[Any]] = None
    color: Optional[HexColor] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _strip_not_empty(v)

    @model_validator(mode="after")
    def validate_time_order(self) -> "CreateEventRequest":
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class UpdateEventRequest(BaseModel):
    """Partial event update."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    start_time: Optional[UTCDateTime] = None
    end_time: Optional[UTCDateTime] = None
    location: Optional[str] = None
    category: Optional[EventCategory] = None
    attendees: Optional[list[str]] = None
    is_recurring: Optional[bool] = None
    recurring_pattern: Optional[dict[str, Any]] = None
    reminders: Optional[list[Any]] = None
    color: Optional[HexColor] = None

    @model_validator(mode="before")
    @classmethod
    def validate_required_not_null(cls, data: Any) -> Any:
        return _reject_nulls(
            data, ("title", "start_time", "end_time", "category", "attendees", "is_recurring")
        )

    @model_validator(mode="after")
    def validate_time_order(self) -> "UpdateEventRequest":
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


# =============================================================================
# Achievement Requests
# =============================================================================


class CreateAchievementRequest(BaseModel):
    """Grant an achievement to a family member."""

    user_id: str = Field(..., min_length=1)
    type: AchievementType
    name: str = Field(..., min_length=1, max_length=100, examples=["Star Kid"])
    description: Optional[str] = None
    icon_url: Optional[str] = Field(None, max_length=500)
    points_awarded: int = Field(default=0, ge=0)


# =============================================================================
# Response Models
# =============================================================================


class UserResponse(BaseModel):
    """User profile with derived gamification level."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    role: Role
    family_id: Optional[str] = None
    date_of_birth: Optional[date] = None
    preferences: Optional[dict[str, Any]] = None
    gamification_points: int = 0
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None

    @computed_field
    @property
    def gamification_level(self) -> int:
        return level_for_points(self.gamification_points)

    @computed_field
    @property
    def level_progress(self) -> int:
        return progress_to_next_level(self.gamification_points)


class FamilyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    created_by: str
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    quadrant: int
    status: TaskStatus
    priority: TaskPriority
    assignee_id: Optional[str] = None
    created_by: str
    family_id: str
    due_date: Optional[UTCDateTime] = None
    completed_at: Optional[UTCDateTime] = None
    points: int
    is_recurring: bool
    recurring_pattern: Optional[dict[str, Any]] = None
    attachments: Optional[list[Any]] = None
    subtasks: Optional[list[Any]] = None
    tags: Optional[list[Any]] = None
    estimated_duration: Optional[int] = None
    actual_duration: Optional[int] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    start_time: UTCDateTime
    end_time: UTCDateTime
    location: Optional[str] = None
    category: EventCategory
    attendees: list[str] = Field(default_factory=list)
    created_by: str
    family_id: str
    is_recurring: bool
    recurring_pattern: Optional[dict[str, Any]] = None
    reminders: Optional[list[Any]] = None
    color: Optional[str] = None
    created_at: Optional[UTCDateTime] = None
    updated_at: Optional[UTCDateTime] = None


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    type: AchievementType
    name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    points_awarded: int
    unlocked_at: Optional[UTCDateTime] = None


class NotificationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    title: str
    message: str
    type: NotificationType
    is_read: bool
    action_url: Optional[str] = None
    created_at: Optional[UTCDateTime] = None


class FamilyStatsResponse(BaseModel):
    """Dashboard counters for a family."""

    total_tasks: int = Field(..., description="All tasks in the family")
    completed_tasks: int = Field(..., description="Tasks with status completed")
    completed_today: int = Field(..., description="Tasks completed since local midnight")
    due_this_week: int = Field(..., description="Open tasks due within 7 days, overdue included")
    completion_rate: int = Field(..., ge=0, le=100, description="Rounded completion percentage")


class TaskProgressResponse(BaseModel):
    completed: int
    total: int
    percentage: int


class TaskMatrixResponse(BaseModel):
    """Tasks bucketed by Eisenhower quadrant (keys 1-4 always present)."""

    quadrants: dict[int, list[TaskResponse]]
    counts: dict[int, int]


class TodayTasksResponse(BaseModel):
    """A user's tasks for today (undated tasks included) with progress."""

    tasks: list[TaskResponse]
    progress: TaskProgressResponse


class CalendarBucket(BaseModel):
    date: date
    hour: Optional[int] = Field(None, ge=0, le=23, description="Set for week/day views")
    events: list[EventResponse]


class CalendarResponse(BaseModel):
    view: Literal["month", "week", "day"]
    start: datetime
    end: datetime
    buckets: list[CalendarBucket]


class DisplayTagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    color: str


class MemberOverviewResponse(BaseModel):
    """Family member card: profile, level, today's progress and role display."""

    user: UserResponse
    level: int
    level_progress: int
    points_to_next_level: int
    today: TaskProgressResponse
    role_label: str
    tags: list[DisplayTagResponse]
    badges: list[DisplayTagResponse]


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Error information for failed requests."""

    error_type: str = Field(..., description="Type of error")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(None, description="Additional error details")
    retryable: bool = Field(default=False, description="Whether request can be retried")


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"] = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    database_connected: bool = Field(..., description="Database connection status")
