"""Data access layer (repositories) for persistence operations.

This module provides repository classes for volunteers, events, enrollments
and notifications. Repositories are bound to a caller-owned session, never
commit on their own, and return domain models rather than ORM models.
"""

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, insert, literal, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.models import (
    ACTIVE_ENROLLMENT_STATUSES,
    Enrollment,
    EnrollmentStatus,
    Event,
    Notification,
    Volunteer,
)

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import (
    EnrollmentModel,
    EventModel,
    NotificationModel,
    VolunteerModel,
    _format_datetime,
)

logger = logging.getLogger(__name__)

_ACTIVE_STATUS_VALUES = [status.value for status in ACTIVE_ENROLLMENT_STATUSES]


class VolunteerRepository:
    """Repository for volunteer profile operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, volunteer_id: int) -> Optional[Volunteer]:
        """Retrieve a volunteer by primary key.

        Returns:
            Volunteer domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(VolunteerModel, volunteer_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving volunteer {volunteer_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve volunteer: {e}") from e

    def get_all(self) -> List[Volunteer]:
        """Retrieve all volunteers ordered by full name, then id.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(VolunteerModel).order_by(VolunteerModel.full_name, VolunteerModel.id)
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving volunteers: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve volunteers: {e}") from e

    def upsert(self, volunteer: Volunteer) -> Volunteer:
        """Insert a new volunteer or update an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(VolunteerModel, volunteer.volunteer_id)

            if existing:
                existing.apply(volunteer)
                self.session.flush()
                return existing.to_domain()

            model = VolunteerModel.from_domain(volunteer)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error upserting volunteer {volunteer.volunteer_id}: {e}", exc_info=True
            )
            raise DataIntegrityError(
                f"Failed to upsert volunteer due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting volunteer {volunteer.volunteer_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert volunteer: {e}") from e


class EventRepository:
    """Repository for event operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, event_id: int) -> Optional[Event]:
        """Retrieve an event by primary key.

        Returns:
            Event domain model if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(EventModel, event_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving event {event_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve event: {e}") from e

    def get_all(self) -> List[Event]:
        """Retrieve all events ordered by start time, then id.

        Events without a start time sort first, matching SQL NULL ordering.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(EventModel).order_by(EventModel.start_time, EventModel.id)
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving events: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve events: {e}") from e

    def get_upcoming(self, since: datetime) -> List[Event]:
        """Retrieve events starting at or after ``since``, by start time then id.

        Stored timestamps share one fixed-width UTC format, so comparing the
        strings compares the instants. Events without a start time are skipped.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(EventModel)
                .where(EventModel.start_time >= _format_datetime(since))
                .order_by(EventModel.start_time, EventModel.id)
            )
            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving upcoming events: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve upcoming events: {e}") from e

    def upsert(self, event: Event) -> Event:
        """Insert a new event or update an existing one.

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(EventModel, event.event_id)

            if existing:
                existing.apply(event)
                self.session.flush()
                return existing.to_domain()

            model = EventModel.from_domain(event)
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(f"Integrity error upserting event {event.event_id}: {e}", exc_info=True)
            raise DataIntegrityError(
                f"Failed to upsert event due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error upserting event {event.event_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to upsert event: {e}") from e


class EnrollmentRepository:
    """Repository for volunteer history (enrollment) operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def _active_clause(self, volunteer_id: int, event_id: int):
        return and_(
            EnrollmentModel.volunteer_id == volunteer_id,
            EnrollmentModel.event_id == event_id,
            EnrollmentModel.event_status.in_(_ACTIVE_STATUS_VALUES),
        )

    def has_active(self, volunteer_id: int, event_id: int) -> bool:
        """Check for an Upcoming or Attended record for the pair.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(EnrollmentModel.history_id).where(
                self._active_clause(volunteer_id, event_id)
            ).limit(1)
            return self.session.execute(stmt).first() is not None

        except SQLAlchemyError as e:
            logger.error(
                f"Error checking enrollment for volunteer {volunteer_id}, event {event_id}: {e}",
                exc_info=True,
            )
            raise PersistenceError(f"Failed to check enrollment: {e}") from e

    def create(self, volunteer_id: int, event_id: int, enrolled_at: datetime) -> Enrollment:
        """Insert an Upcoming record unconditionally.

        Raises:
            DataIntegrityError: If volunteer or event does not exist
            PersistenceError: If database error occurs
        """
        try:
            model = EnrollmentModel(
                volunteer_id=volunteer_id,
                event_id=event_id,
                event_status=EnrollmentStatus.UPCOMING.value,
                enrolled_at=_format_datetime(enrolled_at),
            )
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error creating enrollment {volunteer_id}/{event_id}: {e}", exc_info=True
            )
            raise DataIntegrityError(
                f"Failed to create enrollment due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error creating enrollment {volunteer_id}/{event_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to create enrollment: {e}") from e

    def insert_if_absent(
        self, volunteer_id: int, event_id: int, enrolled_at: datetime
    ) -> Optional[Enrollment]:
        """Create an Upcoming record unless an active one already exists.

        Issued as a single INSERT ... SELECT ... WHERE NOT EXISTS statement so the
        existence check and the write cannot interleave with a concurrent call.

        Returns:
            The new Enrollment, or None if an active record already existed

        Raises:
            DataIntegrityError: If volunteer or event does not exist
            PersistenceError: If database error occurs
        """
        try:
            already_active = (
                select(EnrollmentModel.history_id)
                .where(self._active_clause(volunteer_id, event_id))
                .correlate(None)
                .exists()
            )
            source = select(
                literal(volunteer_id),
                literal(event_id),
                literal(EnrollmentStatus.UPCOMING.value),
                literal(_format_datetime(enrolled_at)),
            ).where(~already_active)

            stmt = insert(EnrollmentModel).from_select(
                ["volunteer_id", "event_id", "event_status", "enrolled_at"],
                source,
            )
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                logger.debug(
                    f"Active enrollment already exists for volunteer {volunteer_id}, event {event_id}"
                )
                return None

            return self.latest_active(volunteer_id, event_id)

        except IntegrityError as e:
            logger.error(
                f"Integrity error enrolling volunteer {volunteer_id} in event {event_id}: {e}",
                exc_info=True,
            )
            raise DataIntegrityError(
                f"Failed to enroll due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(
                f"Error enrolling volunteer {volunteer_id} in event {event_id}: {e}", exc_info=True
            )
            raise PersistenceError(f"Failed to enroll: {e}") from e

    def latest_active(self, volunteer_id: int, event_id: int) -> Optional[Enrollment]:
        """Return the most recent active record for the pair, if any.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(EnrollmentModel)
                .where(self._active_clause(volunteer_id, event_id))
                .order_by(EnrollmentModel.history_id.desc())
                .limit(1)
            )
            model = self.session.execute(stmt).scalar_one_or_none()
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving enrollment {volunteer_id}/{event_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve enrollment: {e}") from e

    def get_for_volunteer(
        self, volunteer_id: int, status: Optional[EnrollmentStatus] = None
    ) -> List[Enrollment]:
        """Retrieve a volunteer's history, oldest first, optionally by status.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(EnrollmentModel).where(EnrollmentModel.volunteer_id == volunteer_id)
            if status is not None:
                stmt = stmt.where(EnrollmentModel.event_status == EnrollmentStatus(status).value)
            stmt = stmt.order_by(EnrollmentModel.history_id.asc())

            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving history for volunteer {volunteer_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve enrollments: {e}") from e


class NotificationRepository:
    """Repository for in-app notification operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add(self, volunteer_id: int, message: str, created_at: datetime) -> Notification:
        """Insert an unread notification.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = NotificationModel(
                volunteer_id=volunteer_id,
                message=message,
                is_read=False,
                created_at=_format_datetime(created_at),
            )
            self.session.add(model)
            self.session.flush()
            return model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error adding notification for volunteer {volunteer_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add notification: {e}") from e

    def get_all(self, volunteer_id: Optional[int] = None) -> List[Notification]:
        """Retrieve notifications newest first, optionally for one volunteer.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = select(NotificationModel)
            if volunteer_id is not None:
                stmt = stmt.where(NotificationModel.volunteer_id == volunteer_id)
            stmt = stmt.order_by(NotificationModel.id.desc())

            models = self.session.execute(stmt).scalars().all()
            return [model.to_domain() for model in models]

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notifications: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve notifications: {e}") from e

    def mark_read(self, notification_id: int) -> None:
        """Mark a notification as read.

        Raises:
            RecordNotFoundError: If notification_id doesn't exist
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                update(NotificationModel)
                .where(NotificationModel.id == notification_id)
                .values(is_read=True)
            )
            result = self.session.execute(stmt)
            self.session.flush()

            if result.rowcount == 0:
                raise RecordNotFoundError(f"Notification {notification_id} not found")

        except RecordNotFoundError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Error marking notification {notification_id} read: {e}", exc_info=True)
            raise PersistenceError(f"Failed to mark notification read: {e}") from e
