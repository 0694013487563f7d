"""Relational DataStore backed by SQLAlchemy sessions and repositories."""

from datetime import datetime
from typing import List, Optional

from app.domain.models import Enrollment, EnrollmentStatus, Event, Notification, Volunteer
from app.logging import get_logger
from app.utils.timestamps import utc_now

from .base import DataStore
from .database import close_database, get_session, init_database
from .repositories import (
    EnrollmentRepository,
    EventRepository,
    NotificationRepository,
    VolunteerRepository,
)

logger = get_logger(__name__, component="database")


class SQLDataStore(DataStore):
    """DataStore implementation over the module-level SQLAlchemy engine.

    Each operation runs in its own session, so each call is one transaction.
    """

    backend_name = "sql"

    def __init__(self, database_url: str, initialize: bool = True):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy database URL
            initialize: Whether to call init_database() (False when the caller already did)
        """
        self.database_url = database_url
        if initialize:
            init_database(database_url)
        logger.info(
            "Relational data store ready",
            extra={"event": "store.ready", "backend": self.backend_name},
        )

    def get_volunteer(self, volunteer_id: int) -> Optional[Volunteer]:
        with get_session() as session:
            return VolunteerRepository(session).get_by_id(volunteer_id)

    def list_volunteers(self) -> List[Volunteer]:
        with get_session() as session:
            return VolunteerRepository(session).get_all()

    def save_volunteer(self, volunteer: Volunteer) -> Volunteer:
        with get_session() as session:
            return VolunteerRepository(session).upsert(volunteer)

    def get_event(self, event_id: int) -> Optional[Event]:
        with get_session() as session:
            return EventRepository(session).get_by_id(event_id)

    def list_candidate_events(self, now: Optional[datetime] = None) -> List[Event]:
        with get_session() as session:
            return EventRepository(session).get_upcoming(now or utc_now())

    def save_event(self, event: Event) -> Event:
        with get_session() as session:
            return EventRepository(session).upsert(event)

    def has_active_enrollment(self, volunteer_id: int, event_id: int) -> bool:
        with get_session() as session:
            return EnrollmentRepository(session).has_active(volunteer_id, event_id)

    def create_enrollment(self, volunteer_id: int, event_id: int) -> Enrollment:
        with get_session() as session:
            return EnrollmentRepository(session).create(volunteer_id, event_id, utc_now())

    def enroll_if_absent(self, volunteer_id: int, event_id: int) -> Optional[Enrollment]:
        with get_session() as session:
            return EnrollmentRepository(session).insert_if_absent(
                volunteer_id, event_id, utc_now()
            )

    def list_enrollments(
        self, volunteer_id: int, status: Optional[EnrollmentStatus] = None
    ) -> List[Enrollment]:
        with get_session() as session:
            return EnrollmentRepository(session).get_for_volunteer(volunteer_id, status)

    def add_notification(self, volunteer_id: int, message: str) -> Notification:
        with get_session() as session:
            return NotificationRepository(session).add(volunteer_id, message, utc_now())

    def list_notifications(self, volunteer_id: Optional[int] = None) -> List[Notification]:
        with get_session() as session:
            return NotificationRepository(session).get_all(volunteer_id)

    def mark_notification_read(self, notification_id: int) -> None:
        with get_session() as session:
            NotificationRepository(session).mark_read(notification_id)

    def close(self) -> None:
        close_database()
