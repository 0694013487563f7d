"""Abstract data-access contract shared by all storage backends.

Services depend on DataStore only. The concrete backend (relational or
in-memory) is chosen once at process start by create_data_store().
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from app.domain.models import Enrollment, EnrollmentStatus, Event, Notification, Volunteer


class DataStore(ABC):
    """Storage contract for volunteers, events, enrollments and notifications.

    Every method raises PersistenceError (or a subclass) when the backend
    itself fails. Lookups that miss return None rather than raising.
    """

    backend_name: str = "abstract"

    # Volunteers

    @abstractmethod
    def get_volunteer(self, volunteer_id: int) -> Optional[Volunteer]:
        """Return the volunteer, or None if unknown."""

    @abstractmethod
    def list_volunteers(self) -> List[Volunteer]:
        """Return all volunteers ordered by full name, then id."""

    @abstractmethod
    def save_volunteer(self, volunteer: Volunteer) -> Volunteer:
        """Insert or replace a volunteer."""

    # Events

    @abstractmethod
    def get_event(self, event_id: int) -> Optional[Event]:
        """Return the event, or None if unknown."""

    @abstractmethod
    def list_candidate_events(self, now: Optional[datetime] = None) -> List[Event]:
        """Return upcoming events, ordered by start time then id.

        An event is upcoming when its start time is at or after ``now``
        (default: the current UTC time). Events without a start time are
        never upcoming.
        """

    @abstractmethod
    def save_event(self, event: Event) -> Event:
        """Insert or replace an event."""

    # Enrollments

    @abstractmethod
    def has_active_enrollment(self, volunteer_id: int, event_id: int) -> bool:
        """Whether an Upcoming or Attended record exists for the pair."""

    @abstractmethod
    def create_enrollment(self, volunteer_id: int, event_id: int) -> Enrollment:
        """Unconditionally create an Upcoming record."""

    @abstractmethod
    def enroll_if_absent(self, volunteer_id: int, event_id: int) -> Optional[Enrollment]:
        """Atomically create an Upcoming record unless an active one exists.

        Returns:
            The created Enrollment, or None when the pair was already enrolled
        """

    @abstractmethod
    def list_enrollments(
        self, volunteer_id: int, status: Optional[EnrollmentStatus] = None
    ) -> List[Enrollment]:
        """Return a volunteer's history, oldest first, optionally filtered by status."""

    # Notifications

    @abstractmethod
    def add_notification(self, volunteer_id: int, message: str) -> Notification:
        """Record an unread in-app notification."""

    @abstractmethod
    def list_notifications(self, volunteer_id: Optional[int] = None) -> List[Notification]:
        """Return notifications newest first, optionally for one volunteer."""

    @abstractmethod
    def mark_notification_read(self, notification_id: int) -> None:
        """Mark a notification read; RecordNotFoundError if it does not exist."""

    def close(self) -> None:
        """Release backend resources."""
