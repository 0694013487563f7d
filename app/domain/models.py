"""Core domain models for volunteers, events, enrollments and notifications.

This module defines the data structures used throughout the application:
- Availability: inclusive time window a volunteer can serve in
- Volunteer: profile used as the matching input
- Event: candidate event a volunteer can be matched to
- Enrollment: a volunteer's participation record for an event
- Notification: in-app message addressed to a volunteer

Timestamp and tag fields are parsed leniently. Bad timestamps become None and
bad tag entries are dropped, so a malformed record degrades to "does not
match" rather than failing validation.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.utils.tags import normalize_tag, normalize_tag_list
from app.utils.timestamps import coerce_datetime, ensure_utc


class EnrollmentStatus(str, Enum):
    """Lifecycle states of a volunteer history record."""

    UPCOMING = "Upcoming"
    ATTENDED = "Attended"
    CANCELLED = "Cancelled"
    MISSED = "Missed"


# A pair with a record in one of these states counts as enrolled.
ACTIVE_ENROLLMENT_STATUSES = (EnrollmentStatus.UPCOMING, EnrollmentStatus.ATTENDED)


class Availability(BaseModel):
    """Inclusive availability window.

    No ordering constraint is enforced between start and end.
    """

    start: Optional[datetime] = Field(None, description="Window start (UTC, inclusive)")
    end: Optional[datetime] = Field(None, description="Window end (UTC, inclusive)")

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Optional[datetime]:
        """Parse leniently; unparseable values become None."""
        return coerce_datetime(v)

    def contains(self, start: Optional[datetime], end: Optional[datetime]) -> bool:
        """Check whether the window fully contains [start, end].

        Any missing timestamp on either side means no containment.
        """
        if self.start is None or self.end is None or start is None or end is None:
            return False
        return self.start <= ensure_utc(start) and self.end >= ensure_utc(end)


class Volunteer(BaseModel):
    """Volunteer profile used as the matching input."""

    volunteer_id: int = Field(..., description="Volunteer identifier")
    full_name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Address for emailed notifications")
    location: str = Field("", description="Free-text location, compared verbatim")
    skills: List[str] = Field(default_factory=list, description="Skill tags")
    preferences: List[str] = Field(default_factory=list, description="Preference tags")
    availability: Availability = Field(default_factory=Availability)

    @field_validator("location", mode="before")
    @classmethod
    def location_not_null(cls, v: Any) -> str:
        """Location is never null; it is deliberately not trimmed or case-folded."""
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("skills", "preferences", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> List[str]:
        """Accept lists or comma-separated strings; trim and drop empties."""
        return normalize_tag_list(v)

    @field_validator("availability", mode="before")
    @classmethod
    def coerce_availability(cls, v: Any) -> Any:
        """Accept a mapping or a [start, end] pair; anything else is an empty window."""
        if isinstance(v, (Availability, dict)):
            return v
        if isinstance(v, (list, tuple)) and len(v) == 2:
            return {"start": v[0], "end": v[1]}
        return Availability()

    @field_validator("full_name", "email")
    @classmethod
    def strip_optional(cls, v: Optional[str]) -> Optional[str]:
        """Strip whitespace from optional text fields."""
        if v is None:
            return None
        stripped = v.strip()
        return stripped if stripped else None

    model_config = {"json_schema_extra": {"example": {
        "volunteer_id": 7,
        "full_name": "Ada Lovelace",
        "email": "ada@example.org",
        "location": "Houston",
        "skills": ["first-aid", "driving"],
        "preferences": ["tag-A"],
        "availability": {"start": "2024-01-01T00:00:00Z", "end": "2024-01-31T00:00:00Z"},
    }}}


class Event(BaseModel):
    """Event a volunteer can be matched to."""

    event_id: int = Field(..., description="Event identifier")
    name: str = Field(..., description="Display name used in notifications")
    description: Optional[str] = Field(None, description="Event description")
    location: Optional[str] = Field(None, description="Free-text location, compared verbatim")
    required_skills: List[str] = Field(default_factory=list, description="Required skill tags")
    start_time: Optional[datetime] = Field(None, description="Event start (UTC)")
    end_time: Optional[datetime] = Field(None, description="Event end (UTC)")
    preference_tag: Optional[str] = Field(None, description="Single optional preference tag")
    urgency: Optional[str] = Field(None, description="Urgency label")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Event name is required and non-blank."""
        if not v or not v.strip():
            raise ValueError("Field cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("required_skills", mode="before")
    @classmethod
    def normalize_skills(cls, v: Any) -> List[str]:
        """Accept lists or comma-separated strings; trim and drop empties."""
        return normalize_tag_list(v)

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Optional[datetime]:
        """Parse leniently; unparseable values become None."""
        return coerce_datetime(v)

    @field_validator("preference_tag", mode="before")
    @classmethod
    def blank_tag_is_none(cls, v: Any) -> Optional[str]:
        """A blank preference tag is treated as absent."""
        return normalize_tag(v)

    model_config = {"json_schema_extra": {"example": {
        "event_id": 12,
        "name": "Food Bank Drive",
        "description": "Sorting and packing donations",
        "location": "Houston",
        "required_skills": ["first-aid"],
        "start_time": "2024-01-10T09:00:00Z",
        "end_time": "2024-01-11T17:00:00Z",
        "preference_tag": "tag-A",
        "urgency": "High",
    }}}


class Enrollment(BaseModel):
    """Volunteer history record linking a volunteer to an event."""

    history_id: Optional[int] = Field(None, description="Store-assigned identifier")
    volunteer_id: int = Field(..., description="Volunteer identifier")
    event_id: int = Field(..., description="Event identifier")
    status: EnrollmentStatus = Field(EnrollmentStatus.UPCOMING, description="Record status")
    enrolled_at: datetime = Field(..., description="When the record was created (UTC)")

    @field_validator("enrolled_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @property
    def is_active(self) -> bool:
        """Whether this record blocks a new enrollment for the same pair."""
        return self.status in ACTIVE_ENROLLMENT_STATUSES


class Notification(BaseModel):
    """In-app notification addressed to a volunteer."""

    notification_id: Optional[int] = Field(None, description="Store-assigned identifier")
    volunteer_id: int = Field(..., description="Recipient volunteer")
    message: str = Field(..., min_length=1, description="Notification text")
    is_read: bool = Field(False, description="Whether the volunteer has read it")
    created_at: datetime = Field(..., description="When it was recorded (UTC)")

    @field_validator("created_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)
