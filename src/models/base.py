"""
Base model definitions for SQLAlchemy.

Provides:
- Base declarative base
- TimestampMixin with created_at/updated_at audit fields
- JSON/JSONB column factory function
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, JSON, func
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from src.config import get_settings


def get_json_type():
    """
    Get database-appropriate JSON column type.

    Returns:
        JSONB for PostgreSQL (supports containment queries)
        JSON for SQLite (basic JSON support)
    """
    settings = get_settings()
    db_url = settings.database_url

    if "postgres" in db_url.lower():
        return JSONB
    return JSON


def enum_column_type(enum_cls: type[Enum]) -> SAEnum:
    """
    Column type storing a str-valued Enum by value.

    Stored as VARCHAR (no native database enum) so adding a member
    only needs an application change.
    """
    return SAEnum(
        enum_cls,
        native_enum=False,
        create_constraint=False,
        validate_strings=True,
        values_callable=lambda members: [m.value for m in members],
    )


class Base(DeclarativeBase):
    """Declarative base for all models."""

    def __repr__(self) -> str:
        """String representation showing class name and ID."""
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', None)})>"


class TimestampMixin:
    """
    Audit timestamps for mutable entities.

    Provides:
    - created_at: Timestamp of record creation (UTC)
    - updated_at: Timestamp of last update (UTC, auto-updates)
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        doc="Timestamp of record creation (UTC)"
    )

    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=func.now(),
        nullable=True,
        doc="Timestamp of last update (UTC)"
    )
