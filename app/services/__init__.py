"""Application services exposing the operations a route handler would call."""

from app.domain.exceptions import (
    DependencyError,
    NotFoundError,
    ValidationError,
    VolunteerMatcherError,
)

from .enrollment import EnrollmentOutcome, EnrollmentService, HistoryEntry
from .matching import MatchService

__all__ = [
    "MatchService",
    "EnrollmentService",
    "EnrollmentOutcome",
    "HistoryEntry",
    "VolunteerMatcherError",
    "NotFoundError",
    "ValidationError",
    "DependencyError",
]
