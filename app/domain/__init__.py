"""Domain models for the Volunteer Matcher."""

from .exceptions import (
    DependencyError,
    NotFoundError,
    ValidationError,
    VolunteerMatcherError,
)
from .models import (
    ACTIVE_ENROLLMENT_STATUSES,
    Availability,
    Enrollment,
    EnrollmentStatus,
    Event,
    Notification,
    Volunteer,
)

__all__ = [
    "Availability",
    "Volunteer",
    "Event",
    "Enrollment",
    "EnrollmentStatus",
    "ACTIVE_ENROLLMENT_STATUSES",
    "Notification",
    "VolunteerMatcherError",
    "NotFoundError",
    "ValidationError",
    "DependencyError",
]
