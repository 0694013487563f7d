"""Unit tests for domain models."""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from app.domain.exceptions import NotFoundError
from app.domain.exceptions import ValidationError as SeedValidationError
from app.domain.models import (
    Availability,
    Enrollment,
    EnrollmentStatus,
    Event,
    Notification,
    Volunteer,
)


class TestAvailability:
    """Tests for Availability model."""

    def test_parses_iso_strings(self):
        availability = Availability(start="2024-01-01T00:00:00Z", end="2024-01-31T00:00:00Z")

        assert availability.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert availability.end == datetime(2024, 1, 31, tzinfo=timezone.utc)

    def test_accepts_dates(self):
        availability = Availability(start=date(2024, 1, 1), end=date(2024, 1, 31))

        assert availability.start.tzinfo == timezone.utc

    def test_unparseable_values_become_none(self):
        availability = Availability(start="next tuesday", end=12345)

        assert availability.start is None
        assert availability.end is None

    def test_start_after_end_is_accepted(self):
        availability = Availability(start="2024-02-01T00:00:00Z", end="2024-01-01T00:00:00Z")

        assert availability.start > availability.end

    def test_contains_inclusive_bounds(self):
        availability = Availability(start="2024-01-10T09:00:00Z", end="2024-01-11T17:00:00Z")

        assert availability.contains(availability.start, availability.end) is True

    def test_contains_rejects_event_outside_window(self):
        availability = Availability(start="2024-01-01T00:00:00Z", end="2024-01-31T00:00:00Z")
        start = datetime(2024, 1, 30, tzinfo=timezone.utc)
        end = datetime(2024, 2, 2, tzinfo=timezone.utc)

        assert availability.contains(start, end) is False

    def test_contains_with_missing_timestamps(self):
        availability = Availability(start="2024-01-01T00:00:00Z", end=None)
        start = datetime(2024, 1, 10, tzinfo=timezone.utc)

        assert availability.contains(start, start) is False
        assert Availability().contains(start, start) is False
        assert Availability(start="2024-01-01", end="2024-02-01").contains(None, start) is False


class TestVolunteer:
    """Tests for Volunteer model."""

    def test_valid_volunteer(self, houston_volunteer):
        assert houston_volunteer.volunteer_id == 1
        assert houston_volunteer.location == "Houston"
        assert houston_volunteer.skills == ["first-aid", "driving"]
        assert houston_volunteer.preferences == ["tag-A"]

    def test_skills_from_comma_separated_string(self):
        volunteer = Volunteer(volunteer_id=1, skills=" first-aid , driving,,first-aid")

        assert volunteer.skills == ["first-aid", "driving"]

    def test_location_none_becomes_empty_string(self):
        volunteer = Volunteer(volunteer_id=1, location=None)

        assert volunteer.location == ""

    def test_location_is_not_trimmed_or_case_folded(self):
        volunteer = Volunteer(volunteer_id=1, location=" houston ")

        assert volunteer.location == " houston "

    def test_missing_availability_is_empty_window(self):
        volunteer = Volunteer(volunteer_id=1, availability=None)

        assert volunteer.availability.start is None
        assert volunteer.availability.end is None

    def test_availability_pair_becomes_window(self):
        volunteer = Volunteer(volunteer_id=1, availability=[date(2024, 1, 1), "2024-01-31T00:00:00Z"])

        assert volunteer.availability.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert volunteer.availability.end == datetime(2024, 1, 31, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["garbage", 42, ["2024-01-01"], True])
    def test_malformed_availability_is_empty_window(self, value):
        volunteer = Volunteer(volunteer_id=1, availability=value)

        assert volunteer.availability.start is None
        assert volunteer.availability.end is None
        assert volunteer.availability.contains(
            datetime(2024, 1, 10, tzinfo=timezone.utc), datetime(2024, 1, 11, tzinfo=timezone.utc)
        ) is False

    def test_blank_name_and_email_become_none(self):
        volunteer = Volunteer(volunteer_id=1, full_name="   ", email="")

        assert volunteer.full_name is None
        assert volunteer.email is None

    def test_volunteer_id_required(self):
        with pytest.raises(ValidationError):
            Volunteer(full_name="No Id")


class TestEvent:
    """Tests for Event model."""

    def test_valid_event(self, houston_event):
        assert houston_event.event_id == 10
        assert houston_event.required_skills == ["first-aid"]
        assert houston_event.start_time == datetime(2024, 1, 10, 9, 0, tzinfo=timezone.utc)

    def test_name_is_required(self):
        with pytest.raises(ValidationError):
            Event(event_id=1, name="   ")

        with pytest.raises(ValidationError):
            Event(event_id=1)

    def test_name_is_stripped(self):
        assert Event(event_id=1, name="  Food Drive  ").name == "Food Drive"

    def test_blank_preference_tag_becomes_none(self):
        assert Event(event_id=1, name="Drive", preference_tag="  ").preference_tag is None

    def test_invalid_times_become_none(self):
        event = Event(event_id=1, name="Drive", start_time="soon", end_time="")

        assert event.start_time is None
        assert event.end_time is None

    def test_location_is_optional_and_verbatim(self):
        assert Event(event_id=1, name="Drive").location is None
        assert Event(event_id=1, name="Drive", location="HOUSTON ").location == "HOUSTON "

    def test_json_dump_uses_iso_timestamps(self, houston_event):
        payload = houston_event.model_dump(mode="json")

        assert payload["start_time"].startswith("2024-01-10T09:00:00")
        assert payload["required_skills"] == ["first-aid"]


class TestEnrollment:
    """Tests for Enrollment model."""

    @pytest.mark.parametrize(
        "status,active",
        [
            (EnrollmentStatus.UPCOMING, True),
            (EnrollmentStatus.ATTENDED, True),
            (EnrollmentStatus.CANCELLED, False),
            (EnrollmentStatus.MISSED, False),
        ],
    )
    def test_is_active(self, status, active):
        enrollment = Enrollment(
            volunteer_id=1,
            event_id=10,
            status=status,
            enrolled_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

        assert enrollment.is_active is active

    def test_status_from_string(self):
        enrollment = Enrollment(
            volunteer_id=1, event_id=10, status="Attended", enrolled_at=datetime(2024, 1, 1)
        )

        assert enrollment.status == EnrollmentStatus.ATTENDED
        assert enrollment.enrolled_at.tzinfo == timezone.utc

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Enrollment(volunteer_id=1, event_id=10, status="Pending", enrolled_at=datetime(2024, 1, 1))


class TestNotification:
    """Tests for Notification model."""

    def test_defaults_to_unread(self):
        notification = Notification(
            volunteer_id=1, message="Hello", created_at=datetime(2024, 1, 1)
        )

        assert notification.is_read is False
        assert notification.notification_id is None

    def test_empty_message_rejected(self):
        with pytest.raises(ValidationError):
            Notification(volunteer_id=1, message="", created_at=datetime(2024, 1, 1))


class TestDomainExceptions:
    """Tests for the domain error taxonomy."""

    def test_not_found_message(self):
        error = NotFoundError("volunteer", 42)

        assert str(error) == "Volunteer not found: 42"
        assert error.entity == "volunteer"
        assert error.entity_id == 42

    def test_validation_error_lists_problems(self):
        error = SeedValidationError("Bad seed", errors=["first", "second"])

        assert "1. first" in str(error)
        assert "2. second" in str(error)
        assert error.errors == ["first", "second"]
