"""
Event storage operations.

Provides:
- Event CRUD
- Family, attendee, date-range and calendar query shapes

Attendee membership is a containment check on the JSON attendee list:
JSONB @> on PostgreSQL, a LIKE prefilter plus an exact check elsewhere.
"""

import json
import logging
from datetime import datetime
from typing import Any, Optional, Sequence

from sqlalchemy import String, cast, select
from sqlalchemy.orm import Session

from src.models.events import Event
from src.timeutils import as_utc

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "family_id", "created_by", "created_at"})

DATETIME_FIELDS = ("start_time", "end_time")


def _normalize(data: dict[str, Any]) -> dict[str, Any]:
    values = dict(data)
    for field in DATETIME_FIELDS:
        if values.get(field) is not None:
            values[field] = as_utc(values[field])
    return values


# =============================================================================
# CRUD
# =============================================================================


def create_event(session: Session, data: dict[str, Any]) -> Event:
    """
    Insert an event.

    Args:
        session: Database session
        data: Column values (family_id and created_by required)

    Returns:
        The persisted Event
    """
    event = Event(**_normalize(data))
    session.add(event)
    session.commit()
    session.refresh(event)
    logger.info(f"Created event {event.id} in family {event.family_id}")
    return event


def get_event(session: Session, event_id: int) -> Optional[Event]:
    """Get an event by id, or None."""
    return session.get(Event, event_id)


def update_event(session: Session, event_id: int, updates: dict[str, Any]) -> Optional[Event]:
    """
    Apply a partial update to an event.

    Returns:
        Updated Event, or None if not found
    """
    event = session.get(Event, event_id)
    if event is None:
        return None

    for field, value in _normalize(updates).items():
        if field in IMMUTABLE_FIELDS or field not in Event.__table__.columns:
            continue
        setattr(event, field, value)

    session.commit()
    session.refresh(event)
    return event


def delete_event(session: Session, event_id: int) -> bool:
    """
    Hard-delete an event.

    Returns:
        True if deleted, False if not found
    """
    event = session.get(Event, event_id)
    if event is None:
        return False

    session.delete(event)
    session.commit()
    logger.info(f"Deleted event {event_id}")
    return True


# =============================================================================
# Queries
# =============================================================================


def get_family_events(session: Session, family_id: str) -> Sequence[Event]:
    """Get all events of a family ordered by start time."""
    stmt = (
        select(Event)
        .where(Event.family_id == family_id)
        .order_by(Event.start_time, Event.id)
    )
    return session.scalars(stmt).all()


def get_user_events(session: Session, user_id: str) -> list[Event]:
    """
    Get events whose attendee list contains the user, by start time.

    Args:
        session: Database session
        user_id: Attendee to look for

    Returns:
        Matching events
    """
    dialect = session.get_bind().dialect.name

    if dialect == "postgresql":
        stmt = (
            select(Event)
            .where(Event.attendees.contains([user_id]))
            .order_by(Event.start_time, Event.id)
        )
        return list(session.scalars(stmt).all())

    # Substring match on the serialized array narrows candidates. The id is
    # serialized the way the column stores it, so escaped characters match.
    # The exact membership check drops ids that merely contain user_id.
    stmt = (
        select(Event)
        .where(cast(Event.attendees, String).contains(json.dumps(user_id), autoescape=True))
        .order_by(Event.start_time, Event.id)
    )
    return [event for event in session.scalars(stmt).all() if event.has_attendee(user_id)]


def get_events_for_date_range(
    session: Session,
    family_id: str,
    start: datetime,
    end: datetime,
) -> Sequence[Event]:
    """
    Get a family's events lying entirely within a range.

    An event is included when start <= event.start_time and
    event.end_time <= end (both bounds inclusive). Events that straddle
    either bound are excluded.

    Args:
        session: Database session
        family_id: Family to query
        start: Range start (inclusive)
        end: Range end (inclusive)

    Returns:
        Events ordered by start time
    """
    stmt = (
        select(Event)
        .where(
            Event.family_id == family_id,
            Event.start_time >= as_utc(start),
            Event.end_time <= as_utc(end),
        )
        .order_by(Event.start_time, Event.id)
    )
    return session.scalars(stmt).all()


def get_events_starting_in_range(
    session: Session,
    family_id: str,
    start: datetime,
    end: datetime,
) -> Sequence[Event]:
    """
    Get a family's events whose start time falls within a range.

    Used by calendar views, which place an event on the day and hour it
    starts. An event starting inside the range is included even when it
    ends after it.
    """
    stmt = (
        select(Event)
        .where(
            Event.family_id == family_id,
            Event.start_time >= as_utc(start),
            Event.start_time <= as_utc(end),
        )
        .order_by(Event.start_time, Event.id)
    )
    return session.scalars(stmt).all()
