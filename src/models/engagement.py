"""
Achievement and Notification models.

Both belong to a single user. Achievements are granted manually;
notifications are only mutated by marking them read.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, enum_column_type
from src.models.enums import AchievementType, NotificationType

if TYPE_CHECKING:
    from src.models.family import User


class Achievement(Base):
    """A badge, level or milestone unlocked by a user."""

    __tablename__ = "achievements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)

    type: Mapped[AchievementType] = mapped_column(
        enum_column_type(AchievementType),
        nullable=False,
        doc="badge, level or milestone"
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    points_awarded: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="achievements")

    __table_args__ = (
        Index("idx_achievement_user", "user_id", "unlocked_at"),
    )

    def __repr__(self) -> str:
        return f"<Achievement(id={self.id}, user_id='{self.user_id}', name='{self.name}')>"


class Notification(Base):
    """An in-app message for a single user."""

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[NotificationType] = mapped_column(
        enum_column_type(NotificationType),
        nullable=False,
        doc="task, event, achievement or family"
    )

    is_read: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default="0",
    )

    action_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    user: Mapped["User"] = relationship("User", back_populates="notifications")

    __table_args__ = (
        Index("idx_notification_user", "user_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, user_id='{self.user_id}', is_read={self.is_read})>"
