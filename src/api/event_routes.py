"""
Event API routes.

The family calendar: CRUD, date-range and attendee queries, calendar
views bucketed by day or hour, and the caller's upcoming events.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Literal, Optional
from zoneinfo import ZoneInfo

from dateutil.parser import parse as parse_date
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from src.api.dependencies import get_now, get_timezone, require_family
from src.api.models import (
    CalendarResponse,
    CreateEventRequest,
    EventResponse,
    MessageResponse,
    UpdateEventRequest,
)
from src.api.response_builder import build_calendar
from src.database import get_db
from src.models import Event, User
from src.services import (
    FamilyHubError,
    create_event,
    delete_event,
    get_event,
    get_events_for_date_range,
    get_events_starting_in_range,
    get_family_events,
    get_user,
    get_user_events,
    update_event,
)
from src.services.display import calendar_range, upcoming_events
from src.timeutils import as_utc

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])

DEFAULT_RANGE = timedelta(days=30)


def _parse_datetime(value: str, field: str) -> datetime:
    try:
        parsed = parse_date(value)
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid date format for {field}: {e}")

    # Ensure timezone aware
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _check_attendees(db: Session, attendees: Optional[list[str]], user: User) -> None:
    for attendee_id in attendees or []:
        attendee = get_user(db, attendee_id)
        if attendee is None or attendee.family_id != user.family_id:
            raise FamilyHubError(f"Attendee {attendee_id} is not a member of your family")


def _get_family_event(db: Session, event_id: int, user: User) -> Event:
    event = get_event(db, event_id)
    if event is None or event.family_id != user.family_id:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("", response_model=EventResponse, status_code=201)
def create_new_event(
    request: CreateEventRequest,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> EventResponse:
    """Create an event on the caller's family calendar."""
    _check_attendees(db, request.attendees, user)
    event = create_event(
        db,
        {**request.model_dump(), "created_by": user.id, "family_id": user.family_id},
    )
    return EventResponse.model_validate(event)


@router.get("", response_model=list[EventResponse])
def list_events(
    start_date: Optional[str] = Query(None, description="Range start (ISO 8601)"),
    end_date: Optional[str] = Query(None, description="Range end (ISO 8601)"),
    attendee: Optional[str] = Query(None, description="User id, or 'me'"),
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> list[EventResponse]:
    """
    List family events by start time.

    With start_date or end_date, only events lying entirely within the
    range are returned; a missing bound defaults to now / 30 days after
    start. With attendee, only events that user attends.
    """
    if attendee is not None:
        attendee_id = user.id if attendee == "me" else attendee
        events = [e for e in get_user_events(db, attendee_id) if e.family_id == user.family_id]
    elif start_date or end_date:
        start = _parse_datetime(start_date, "start_date") if start_date else datetime.now(timezone.utc)
        end = _parse_datetime(end_date, "end_date") if end_date else start + DEFAULT_RANGE
        if end < start:
            raise HTTPException(status_code=400, detail="end_date must not be before start_date")
        events = get_events_for_date_range(db, user.family_id, start, end)
    else:
        events = get_family_events(db, user.family_id)

    return [EventResponse.model_validate(e) for e in events]


@router.get("/calendar", response_model=CalendarResponse)
def calendar_view(
    view: Literal["month", "week", "day"] = Query("month"),
    anchor: Optional[date] = Query(None, alias="date", description="Day inside the view (default today)"),
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
    tz: ZoneInfo = Depends(get_timezone),
) -> CalendarResponse:
    """
    Events for a month, week or day, bucketed for display.

    An event belongs to the view when it starts inside it, whatever its
    end time.
    """
    anchor = anchor or datetime.now(tz).date()
    start, end = calendar_range(view, anchor, tz)
    events = get_events_starting_in_range(db, user.family_id, start, end)
    return build_calendar(view, start, end, events)


@router.get("/upcoming", response_model=list[EventResponse])
def upcoming(
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> list[EventResponse]:
    """The caller's next three events within a week."""
    events = [e for e in get_user_events(db, user.id) if e.family_id == user.family_id]
    return [EventResponse.model_validate(e) for e in upcoming_events(events, now)]


@router.get("/{event_id}", response_model=EventResponse)
def get_event_detail(
    event_id: int,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> EventResponse:
    return EventResponse.model_validate(_get_family_event(db, event_id, user))


@router.put("/{event_id}", response_model=EventResponse)
def update_existing_event(
    event_id: int,
    request: UpdateEventRequest,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> EventResponse:
    """Partially update an event; the resulting times must stay ordered."""
    current = _get_family_event(db, event_id, user)
    updates = request.model_dump(exclude_unset=True)
    if "attendees" in updates:
        _check_attendees(db, updates["attendees"], user)

    start = updates.get("start_time") or current.start_time
    end = updates.get("end_time") or current.end_time
    if as_utc(end) < as_utc(start):
        raise FamilyHubError("end_time must not be before start_time")

    event = update_event(db, event_id, updates)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_existing_event(
    event_id: int,
    user: User = Depends(require_family),
    db: Session = Depends(get_db),
) -> MessageResponse:
    _get_family_event(db, event_id, user)
    if not delete_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"User {user.id} deleted event {event_id}")
    return MessageResponse(message="Event deleted")
