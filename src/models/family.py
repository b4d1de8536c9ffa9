"""
User and Family models.

Entities:
- User: A person signed in to the app; belongs to at most one family
- Family: The tenant boundary scoping users, tasks and events

users.family_id carries no foreign key: a family row references its
creator, and a new user exists before any family does.
"""

import uuid
from datetime import date
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, TimestampMixin, enum_column_type, get_json_type
from src.models.enums import Role

if TYPE_CHECKING:
    from src.models.engagement import Achievement, Notification


class User(TimestampMixin, Base):
    """
    A family member account.

    The id comes from the identity provider and is stable across logins,
    which is what makes upsert-on-login possible.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(
        String(255),
        primary_key=True,
        doc="Identity provider subject id"
    )

    email: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        unique=True,
        doc="Email address"
    )

    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    role: Mapped[Role] = mapped_column(
        enum_column_type(Role),
        nullable=False,
        default=Role.PARENT,
        doc="Role in family: parent, spouse or child"
    )

    family_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        doc="Family this user belongs to (NULL until created or joined)"
    )

    date_of_birth: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    preferences: Mapped[Optional[dict]] = mapped_column(
        get_json_type(),
        nullable=True,
        doc="Free-form UI and notification preferences"
    )

    gamification_points: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        doc="Accumulated points; only ever incremented"
    )

    family: Mapped[Optional["Family"]] = relationship(
        "Family",
        primaryjoin="foreign(User.family_id) == Family.id",
        viewonly=True,
    )

    achievements: Mapped[list["Achievement"]] = relationship(
        "Achievement",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    notifications: Mapped[list["Notification"]] = relationship(
        "Notification",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_user_family", "family_id"),
        Index("idx_user_role", "role"),
    )

    @property
    def level(self) -> int:
        """Gamification level derived from points."""
        from src.services.display import level_for_points

        return level_for_points(self.gamification_points or 0)

    @property
    def display_name(self) -> str:
        return self.first_name or "Family Member"

    def __repr__(self) -> str:
        return f"<User(id='{self.id}', role='{self.role.value}', family_id='{self.family_id}')>"


class Family(TimestampMixin, Base):
    """A household: the grouping that scopes members, tasks and events."""

    __tablename__ = "families"

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: uuid.uuid4().hex,
        doc="Family identifier"
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        doc="Display name, e.g. 'The Smiths'"
    )

    created_by: Mapped[str] = mapped_column(
        ForeignKey("users.id"),
        nullable=False,
        doc="User who created the family"
    )

    creator: Mapped["User"] = relationship("User", foreign_keys=[created_by])

    members: Mapped[list["User"]] = relationship(
        "User",
        primaryjoin="Family.id == foreign(User.family_id)",
        viewonly=True,
        order_by="User.created_at",
    )

    def __repr__(self) -> str:
        return f"<Family(id='{self.id}', name='{self.name}')>"
