"""
Task model.

Tasks are classified on the Eisenhower matrix (quadrant 1-4) and move
through not_started -> in_progress/blocked -> completed. Completing a
task assigned to a child awards its points to that child.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin, enum_column_type, get_json_type
from src.models.enums import Quadrant, TaskPriority, TaskStatus

if TYPE_CHECKING:
    from src.models.family import Family, User


class Task(TimestampMixin, Base):
    """
    A unit of family work.

    Key features:
    - Eisenhower quadrant (1=urgent+important, 2=important, 3=urgent, 4=neither)
    - Status workflow culminating in completed (sets completed_at)
    - Optional point value awarded to child assignees on completion
    - JSON fields for subtasks, tags, attachments and recurrence pattern
    """

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    quadrant: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Eisenhower quadrant 1-4"
    )

    status: Mapped[TaskStatus] = mapped_column(
        enum_column_type(TaskStatus),
        nullable=False,
        default=TaskStatus.NOT_STARTED,
        doc="Workflow status: not_started, in_progress, blocked, completed"
    )

    priority: Mapped[TaskPriority] = mapped_column(
        enum_column_type(TaskPriority),
        nullable=False,
        default=TaskPriority.MEDIUM,
        doc="Priority: low, medium, high, urgent"
    )

    # Ownership
    assignee_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id"),
        nullable=True,
        doc="User responsible for the task"
    )

    created_by: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        doc="User who created the task"
    )

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id"),
        nullable=False,
        doc="Family the task belongs to"
    )

    # Timing
    due_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Due date/time (UTC)"
    )

    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        doc="Set when status becomes completed"
    )

    # Gamification
    points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        doc="Points awarded to a child assignee on completion"
    )

    # Recurrence and extras
    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_pattern: Mapped[Optional[dict]] = mapped_column(get_json_type(), nullable=True)
    attachments: Mapped[Optional[list]] = mapped_column(get_json_type(), nullable=True)
    subtasks: Mapped[Optional[list]] = mapped_column(get_json_type(), nullable=True)
    tags: Mapped[Optional[list]] = mapped_column(get_json_type(), nullable=True)

    estimated_duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Estimated duration in minutes"
    )
    actual_duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        doc="Actual duration in minutes"
    )

    # Relationships
    assignee: Mapped[Optional["User"]] = relationship("User", foreign_keys=[assignee_id])
    creator: Mapped["User"] = relationship("User", foreign_keys=[created_by])
    family: Mapped["Family"] = relationship("Family")

    __table_args__ = (
        CheckConstraint("quadrant BETWEEN 1 AND 4", name="ck_task_quadrant"),
        CheckConstraint("points >= 0", name="ck_task_points"),
        Index("idx_task_family_created", "family_id", "created_at"),
        Index("idx_task_family_quadrant", "family_id", "quadrant"),
        Index("idx_task_assignee", "assignee_id"),
        Index("idx_task_status", "status"),
    )

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def quadrant_kind(self) -> Quadrant:
        return Quadrant(self.quadrant)

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', quadrant={self.quadrant}, status='{self.status.value}')>"
