"""
Unit tests for API request and response models.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.api.models import (
    AddMemberRequest,
    CreateEventRequest,
    CreateFamilyRequest,
    CreateTaskRequest,
    LoginRequest,
    UpdateEventRequest,
    UpdateTaskRequest,
    UserResponse,
)
from src.models import Role, TaskStatus, User


class TestLoginRequest:
    def test_id_is_stripped(self):
        assert LoginRequest(id="  user-1 ").id == "user-1"

    def test_blank_id_rejected(self):
        with pytest.raises(ValidationError):
            LoginRequest(id="   ")


class TestFamilyRequests:
    """Test family and membership requests."""

    def test_name_is_stripped(self):
        assert CreateFamilyRequest(name=" The Smiths ").name == "The Smiths"

    def test_add_member_defaults_to_child(self):
        assert AddMemberRequest(user_id="u").role == Role.CHILD


class TestCreateTaskRequest:
    """Test task creation validation."""

    def test_defaults(self):
        request = CreateTaskRequest(title="Dishes", quadrant=2)

        assert request.status == TaskStatus.NOT_STARTED
        assert request.points == 0
        assert request.assignee_id is None

    @pytest.mark.parametrize("quadrant", [0, 5])
    def test_quadrant_range(self, quadrant):
        with pytest.raises(ValidationError):
            CreateTaskRequest(title="x", quadrant=quadrant)

    def test_cannot_create_completed(self):
        with pytest.raises(ValidationError, match="completed after creation"):
            CreateTaskRequest(title="x", quadrant=1, status="completed")

    def test_naive_due_date_is_utc(self):
        request = CreateTaskRequest(title="x", quadrant=1, due_date="2024-01-10T09:00:00")
        assert request.due_date == datetime(2024, 1, 10, 9, tzinfo=timezone.utc)

    def test_offset_due_date_converted(self):
        request = CreateTaskRequest(title="x", quadrant=1, due_date="2024-01-10T01:00:00-08:00")

        assert request.due_date.tzinfo == timezone.utc
        assert request.due_date.hour == 9


class TestUpdateTaskRequest:
    """Partial updates apply only fields that were sent."""

    def test_unset_fields_excluded(self):
        request = UpdateTaskRequest(title="New")
        assert request.model_dump(exclude_unset=True) == {"title": "New"}

    def test_null_description_allowed(self):
        request = UpdateTaskRequest(description=None)
        assert request.model_dump(exclude_unset=True) == {"description": None}

    def test_null_quadrant_rejected(self):
        with pytest.raises(ValidationError, match="quadrant"):
            UpdateTaskRequest(quadrant=None)


class TestEventRequests:
    """Test event time ordering and colors."""

    def _create(self, **overrides):
        values = {
            "title": "Dentist",
            "start_time": "2024-01-10T09:00:00Z",
            "end_time": "2024-01-10T10:00:00Z",
            "category": "healthcare",
        }
        values.update(overrides)
        return CreateEventRequest(**values)

    def test_valid_event(self):
        request = self._create()

        assert request.attendees == []
        assert request.start_time.tzinfo == timezone.utc

    def test_zero_length_event_allowed(self):
        request = self._create(end_time="2024-01-10T09:00:00Z")
        assert request.end_time == request.start_time

    def test_end_before_start(self):
        with pytest.raises(ValidationError, match="end_time"):
            self._create(end_time="2024-01-10T08:00:00Z")

    def test_bad_color(self):
        with pytest.raises(ValidationError):
            self._create(color="#12345")

    def test_good_color(self):
        assert self._create(color="#aaBB00").color == "#aaBB00"

    def test_update_checks_order_when_both_sent(self):
        with pytest.raises(ValidationError):
            UpdateEventRequest(start_time="2024-01-10T10:00:00Z", end_time="2024-01-10T09:00:00Z")

    def test_update_null_attendees_rejected(self):
        with pytest.raises(ValidationError):
            UpdateEventRequest(attendees=None)


class TestUserResponse:
    """Level fields are derived from points."""

    def test_level_fields(self):
        user = User(id="u", role=Role.CHILD, gamification_points=250)

        data = UserResponse.model_validate(user).model_dump()

        assert data["gamification_level"] == 3
        assert data["level_progress"] == 50

    def test_naive_timestamps_become_utc(self):
        user = User(id="u", role=Role.PARENT, gamification_points=0, created_at=datetime(2024, 1, 1, 8, 0))

        response = UserResponse.model_validate(user)

        assert response.created_at == datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
