"""
Event model.

Events are family calendar entries. Attendees are stored as a JSON array
of user ids (no join table); membership queries use JSONB containment on
PostgreSQL.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin, enum_column_type, get_json_type
from src.models.enums import EventCategory

if TYPE_CHECKING:
    from src.models.family import Family, User


class Event(TimestampMixin, Base):
    """
    Represents a scheduled family event.

    No conflict detection is performed: overlapping events are allowed.
    """

    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(Text, nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timing
    start_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Event start time (UTC)"
    )

    end_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        doc="Event end time (UTC)"
    )

    location: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    category: Mapped[EventCategory] = mapped_column(
        enum_column_type(EventCategory),
        nullable=False,
        doc="work, school, social, healthcare, travel, official, family, sports"
    )

    attendees: Mapped[list] = mapped_column(
        get_json_type(),
        nullable=False,
        default=list,
        doc="User ids attending the event"
    )

    created_by: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        doc="User who created the event"
    )

    family_id: Mapped[str] = mapped_column(
        ForeignKey("families.id"),
        nullable=False,
        doc="Family the event belongs to"
    )

    is_recurring: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    recurring_pattern: Mapped[Optional[dict]] = mapped_column(get_json_type(), nullable=True)
    reminders: Mapped[Optional[list]] = mapped_column(get_json_type(), nullable=True)

    color: Mapped[Optional[str]] = mapped_column(
        String(7),
        nullable=True,
        doc="Hex color code for calendar display (e.g., '#3B82F6')"
    )

    # Relationships
    creator: Mapped["User"] = relationship("User", foreign_keys=[created_by])
    family: Mapped["Family"] = relationship("Family")

    __table_args__ = (
        Index("idx_event_family_start", "family_id", "start_time"),
        Index("idx_event_time_range", "family_id", "start_time", "end_time"),
        Index("idx_event_created_by", "created_by"),
    )

    def has_attendee(self, user_id: str) -> bool:
        return user_id in (self.attendees or [])

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title}', start='{self.start_time}')>"
