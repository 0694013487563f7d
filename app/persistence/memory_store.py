"""In-memory DataStore for running without a database.

Holds everything in process-local dictionaries. Data does not survive a
restart. A single lock guards every mutation so enroll_if_absent keeps the
same check-and-insert atomicity the relational backend gets from its
conditional INSERT.
"""

import itertools
import threading
from datetime import datetime
from typing import Dict, List, Optional

from app.domain.models import (
    Enrollment,
    EnrollmentStatus,
    Event,
    Notification,
    Volunteer,
)
from app.logging import get_logger
from app.utils.timestamps import ensure_utc, utc_now

from .base import DataStore
from .exceptions import DataIntegrityError, RecordNotFoundError

logger = get_logger(__name__, component="memory_store")


class InMemoryDataStore(DataStore):
    """Dictionary-backed DataStore.

    Returned domain objects are copies, so callers cannot mutate stored state.
    """

    backend_name = "memory"

    def __init__(self):
        self._lock = threading.Lock()
        self._volunteers: Dict[int, Volunteer] = {}
        self._events: Dict[int, Event] = {}
        self._enrollments: List[Enrollment] = []
        self._notifications: List[Notification] = []
        self._history_ids = itertools.count(1)
        self._notification_ids = itertools.count(1)
        logger.info(
            "In-memory data store ready; data will not persist across restarts",
            extra={"event": "store.ready", "backend": self.backend_name},
        )

    def get_volunteer(self, volunteer_id: int) -> Optional[Volunteer]:
        volunteer = self._volunteers.get(volunteer_id)
        return volunteer.model_copy(deep=True) if volunteer is not None else None

    def list_volunteers(self) -> List[Volunteer]:
        volunteers = sorted(
            self._volunteers.values(),
            # NULL names sort first, as in SQL
            key=lambda v: (v.full_name is not None, v.full_name or "", v.volunteer_id),
        )
        return [v.model_copy(deep=True) for v in volunteers]

    def save_volunteer(self, volunteer: Volunteer) -> Volunteer:
        with self._lock:
            self._volunteers[volunteer.volunteer_id] = volunteer.model_copy(deep=True)
        return volunteer.model_copy(deep=True)

    def get_event(self, event_id: int) -> Optional[Event]:
        event = self._events.get(event_id)
        return event.model_copy(deep=True) if event is not None else None

    def list_candidate_events(self, now: Optional[datetime] = None) -> List[Event]:
        since = ensure_utc(now) if now is not None else utc_now()
        upcoming = [
            e for e in self._events.values()
            if e.start_time is not None and e.start_time >= since
        ]
        upcoming.sort(key=lambda e: (e.start_time, e.event_id))
        return [e.model_copy(deep=True) for e in upcoming]

    def save_event(self, event: Event) -> Event:
        with self._lock:
            self._events[event.event_id] = event.model_copy(deep=True)
        return event.model_copy(deep=True)

    def has_active_enrollment(self, volunteer_id: int, event_id: int) -> bool:
        with self._lock:
            return self._find_active(volunteer_id, event_id) is not None

    def create_enrollment(self, volunteer_id: int, event_id: int) -> Enrollment:
        with self._lock:
            return self._insert_enrollment(volunteer_id, event_id)

    def enroll_if_absent(self, volunteer_id: int, event_id: int) -> Optional[Enrollment]:
        with self._lock:
            if self._find_active(volunteer_id, event_id) is not None:
                logger.debug(
                    f"Active enrollment already exists for volunteer {volunteer_id}, event {event_id}"
                )
                return None
            return self._insert_enrollment(volunteer_id, event_id)

    def list_enrollments(
        self, volunteer_id: int, status: Optional[EnrollmentStatus] = None
    ) -> List[Enrollment]:
        wanted = EnrollmentStatus(status) if status is not None else None
        with self._lock:
            return [
                e.model_copy()
                for e in self._enrollments
                if e.volunteer_id == volunteer_id and (wanted is None or e.status == wanted)
            ]

    def add_notification(self, volunteer_id: int, message: str) -> Notification:
        with self._lock:
            notification = Notification(
                notification_id=next(self._notification_ids),
                volunteer_id=volunteer_id,
                message=message,
                is_read=False,
                created_at=utc_now(),
            )
            self._notifications.append(notification)
            return notification.model_copy()

    def list_notifications(self, volunteer_id: Optional[int] = None) -> List[Notification]:
        with self._lock:
            selected = [
                n for n in self._notifications
                if volunteer_id is None or n.volunteer_id == volunteer_id
            ]
        return [n.model_copy() for n in reversed(selected)]

    def mark_notification_read(self, notification_id: int) -> None:
        with self._lock:
            for notification in self._notifications:
                if notification.notification_id == notification_id:
                    notification.is_read = True
                    return
        raise RecordNotFoundError(f"Notification {notification_id} not found")

    def _find_active(self, volunteer_id: int, event_id: int) -> Optional[Enrollment]:
        # Caller holds the lock
        for enrollment in self._enrollments:
            if (
                enrollment.volunteer_id == volunteer_id
                and enrollment.event_id == event_id
                and enrollment.is_active
            ):
                return enrollment
        return None

    def _insert_enrollment(self, volunteer_id: int, event_id: int) -> Enrollment:
        # Caller holds the lock; mirrors the relational foreign keys
        if volunteer_id not in self._volunteers or event_id not in self._events:
            raise DataIntegrityError(
                f"Cannot enroll volunteer {volunteer_id} in event {event_id}: unknown volunteer or event"
            )
        enrollment = Enrollment(
            history_id=next(self._history_ids),
            volunteer_id=volunteer_id,
            event_id=event_id,
            status=EnrollmentStatus.UPCOMING,
            enrolled_at=utc_now(),
        )
        self._enrollments.append(enrollment)
        return enrollment.model_copy()
