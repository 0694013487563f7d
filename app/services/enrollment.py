"""Enrollment service: idempotent enroll and the volunteer's dashboard views.

Besides enroll(), the service lists a volunteer's enrollment history and
the upcoming events they could still join.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from app.domain.exceptions import DependencyError, NotFoundError
from app.domain.models import Enrollment, EnrollmentStatus, Event
from app.logging import get_logger, log_context
from app.persistence.base import DataStore
from app.persistence.exceptions import PersistenceError
from app.utils.timestamps import utc_now

logger = get_logger(__name__, component="enrollment")


@dataclass
class EnrollmentOutcome:
    """Result of an enroll call.

    Attributes:
        created: True if a new Upcoming record was written
        enrollment: The new record, or the existing active one
    """

    created: bool
    enrollment: Enrollment

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "enrollment": self.enrollment.model_dump(mode="json"),
        }


@dataclass
class HistoryEntry:
    """One volunteer history record joined with its event."""

    enrollment: Enrollment
    event: Event

    def to_dict(self) -> dict:
        record = self.enrollment.model_dump(mode="json")
        payload = self.event.model_dump(mode="json")
        payload.update(
            history_id=record["history_id"],
            status=record["status"],
            enrolled_at=record["enrolled_at"],
        )
        return payload


class EnrollmentService:
    """Enrolls volunteers in events without ever creating duplicates."""

    def __init__(self, store: DataStore, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or utc_now

    def enroll(self, volunteer_id: int, event_id: int) -> EnrollmentOutcome:
        """Enroll a volunteer in an event.

        If the pair already has an Upcoming or Attended record nothing is
        written. The check and the insert are a single store operation.

        Raises:
            NotFoundError: If the volunteer or the event does not exist
            DependencyError: If the store fails
        """
        with log_context(volunteer_id=volunteer_id, event_id=event_id, operation="enroll"):
            try:
                if self.store.get_volunteer(volunteer_id) is None:
                    raise NotFoundError("volunteer", volunteer_id)
                if self.store.get_event(event_id) is None:
                    raise NotFoundError("event", event_id)

                created = self.store.enroll_if_absent(volunteer_id, event_id)
                if created is not None:
                    logger.info(
                        f"Enrolled volunteer {volunteer_id} in event {event_id}",
                        extra={"event": "enrollment.created", "history_id": created.history_id},
                    )
                    return EnrollmentOutcome(created=True, enrollment=created)

                existing = self._find_active(volunteer_id, event_id)
            except PersistenceError as e:
                logger.error(
                    f"Enrollment failed: {e}",
                    extra={"event": "enrollment.failed", "error_type": "dependency"},
                )
                raise DependencyError(f"Data store unavailable: {e}") from e

            logger.info(
                f"Volunteer {volunteer_id} already enrolled in event {event_id}",
                extra={"event": "enrollment.exists", "history_id": existing.history_id},
            )
            return EnrollmentOutcome(created=False, enrollment=existing)

    def enrolled_events(self, volunteer_id: int) -> List[Event]:
        """Events the volunteer has Upcoming enrollments for, by start time.

        Raises:
            NotFoundError: If the volunteer does not exist
        """
        if self.store.get_volunteer(volunteer_id) is None:
            raise NotFoundError("volunteer", volunteer_id)

        enrollments = self.store.list_enrollments(volunteer_id, EnrollmentStatus.UPCOMING)
        event_ids = list(dict.fromkeys(e.event_id for e in enrollments))
        events = [self.store.get_event(event_id) for event_id in event_ids]

        return sorted(
            (event for event in events if event is not None),
            key=lambda e: (
                e.start_time is not None,
                e.start_time.timestamp() if e.start_time else 0.0,
                e.event_id,
            ),
        )

    def history(self, volunteer_id: int) -> List[HistoryEntry]:
        """Every history record of a volunteer with its event, oldest record first.

        Records whose event no longer exists are left out.

        Raises:
            NotFoundError: If the volunteer does not exist
        """
        if self.store.get_volunteer(volunteer_id) is None:
            raise NotFoundError("volunteer", volunteer_id)

        events = {}
        entries = []
        for enrollment in self.store.list_enrollments(volunteer_id):
            if enrollment.event_id not in events:
                events[enrollment.event_id] = self.store.get_event(enrollment.event_id)
            event = events[enrollment.event_id]
            if event is not None:
                entries.append(HistoryEntry(enrollment=enrollment, event=event))

        logger.debug(
            f"Loaded {len(entries)} history records for volunteer {volunteer_id}",
            extra={"event": "enrollment.history_listed", "record_count": len(entries)},
        )
        return entries

    def browse_events(self, volunteer_id: int) -> List[Event]:
        """Upcoming events the volunteer could still enroll in, by start time.

        Events the volunteer already has an Upcoming or Attended record for
        are left out; Cancelled and Missed records do not hide an event.

        Raises:
            NotFoundError: If the volunteer does not exist
        """
        if self.store.get_volunteer(volunteer_id) is None:
            raise NotFoundError("volunteer", volunteer_id)

        taken = {e.event_id for e in self.store.list_enrollments(volunteer_id) if e.is_active}
        return [
            event for event in self.store.list_candidate_events(now=self.clock())
            if event.event_id not in taken
        ]

    def _find_active(self, volunteer_id: int, event_id: int) -> Enrollment:
        active = [
            e for e in self.store.list_enrollments(volunteer_id)
            if e.event_id == event_id and e.is_active
        ]
        if not active:
            # The blocking record vanished between the two calls
            raise DependencyError(
                f"Active enrollment for volunteer {volunteer_id}, event {event_id} disappeared"
            )
        return active[-1]
