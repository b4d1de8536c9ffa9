"""
SQLAlchemy models for Family Hub.

This module exports all database models for easy importing and
ensures Alembic can discover them for migrations.
"""

# Import base classes
from src.models.base import Base, TimestampMixin, enum_column_type, get_json_type

# Enumerations
from src.models.enums import (
    AchievementType,
    EventCategory,
    NotificationType,
    Quadrant,
    Role,
    TaskPriority,
    TaskStatus,
)

# Import all models (must be imported for Alembic autogenerate)
from src.models.family import User, Family
from src.models.tasks import Task
from src.models.events import Event
from src.models.engagement import Achievement, Notification
from src.models.sessions import UserSession

# Export all for easy importing
__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "enum_column_type",
    "get_json_type",
    # Enumerations
    "AchievementType",
    "EventCategory",
    "NotificationType",
    "Quadrant",
    "Role",
    "TaskPriority",
    "TaskStatus",
    # Family models
    "User",
    "Family",
    # Work and calendar
    "Task",
    "Event",
    # Engagement
    "Achievement",
    "Notification",
    # Sessions
    "UserSession",
]
