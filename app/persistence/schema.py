"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for the database schema and provides
conversion methods between ORM models and domain models.

Tag lists (skills, preferences, required skills) are stored as comma-separated
text. Timestamps are stored as ISO 8601 UTC strings.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.domain.models import (
    Availability,
    Enrollment,
    EnrollmentStatus,
    Event,
    Notification,
    Volunteer,
)
from app.utils.tags import join_tags
from app.utils.timestamps import parse_iso_datetime

logger = logging.getLogger(__name__)

Base = declarative_base()


class VolunteerModel(Base):
    """ORM model for volunteers table."""

    __tablename__ = "volunteers"

    id = Column(Integer, primary_key=True, autoincrement=False)
    full_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    location = Column(String(255), nullable=False, default="")
    skills = Column(Text, nullable=False, default="")
    preferences = Column(Text, nullable=False, default="")

    # Kept as raw strings; unparseable values read back as None
    availability_start = Column(String(50), nullable=True)
    availability_end = Column(String(50), nullable=True)

    def to_domain(self) -> Volunteer:
        """Convert ORM model to domain model.

        Returns:
            Volunteer: Domain model instance
        """
        return Volunteer(
            volunteer_id=self.id,
            full_name=self.full_name,
            email=self.email,
            location=self.location,
            skills=self.skills,
            preferences=self.preferences,
            availability=Availability(
                start=self.availability_start,
                end=self.availability_end,
            ),
        )

    @classmethod
    def from_domain(cls, volunteer: Volunteer) -> "VolunteerModel":
        """Create ORM model from domain model.

        Args:
            volunteer: Domain model instance

        Returns:
            VolunteerModel: ORM model instance
        """
        model = cls(id=volunteer.volunteer_id)
        model.apply(volunteer)
        return model

    def apply(self, volunteer: Volunteer) -> None:
        """Copy mutable fields from a domain model onto this row."""
        self.full_name = volunteer.full_name
        self.email = volunteer.email
        self.location = volunteer.location
        self.skills = join_tags(volunteer.skills)
        self.preferences = join_tags(volunteer.preferences)
        self.availability_start = _format_datetime(volunteer.availability.start)
        self.availability_end = _format_datetime(volunteer.availability.end)


class EventModel(Base):
    """ORM model for events table."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    required_skills = Column(Text, nullable=False, default="")
    start_time = Column(String(50), nullable=True)
    end_time = Column(String(50), nullable=True)
    preference_tag = Column(String(100), nullable=True)
    urgency = Column(String(50), nullable=True)

    __table_args__ = (Index("idx_events_start_time", "start_time"),)

    def to_domain(self) -> Event:
        """Convert ORM model to domain model.

        Returns:
            Event: Domain model instance
        """
        return Event(
            event_id=self.id,
            name=self.name,
            description=self.description,
            location=self.location,
            required_skills=self.required_skills,
            start_time=self.start_time,
            end_time=self.end_time,
            preference_tag=self.preference_tag,
            urgency=self.urgency,
        )

    @classmethod
    def from_domain(cls, event: Event) -> "EventModel":
        """Create ORM model from domain model.

        Args:
            event: Domain model instance

        Returns:
            EventModel: ORM model instance
        """
        model = cls(id=event.event_id)
        model.apply(event)
        return model

    def apply(self, event: Event) -> None:
        """Copy mutable fields from a domain model onto this row."""
        self.name = event.name
        self.description = event.description
        self.location = event.location
        self.required_skills = join_tags(event.required_skills)
        self.start_time = _format_datetime(event.start_time)
        self.end_time = _format_datetime(event.end_time)
        self.preference_tag = event.preference_tag
        self.urgency = event.urgency


class EnrollmentModel(Base):
    """ORM model for volunteer_history table.

    One row per enrollment. Idempotence is enforced by the conditional insert
    in EnrollmentRepository, since a pair may legitimately have several
    historical (cancelled/missed) rows.
    """

    __tablename__ = "volunteer_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, ForeignKey("volunteers.id"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    event_status = Column(String(20), nullable=False, default=EnrollmentStatus.UPCOMING.value)
    enrolled_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_history_pair", "volunteer_id", "event_id"),
        Index("idx_history_status", "event_status"),
    )

    def to_domain(self) -> Enrollment:
        """Convert ORM model to domain model.

        Returns:
            Enrollment: Domain model instance
        """
        return Enrollment(
            history_id=self.history_id,
            volunteer_id=self.volunteer_id,
            event_id=self.event_id,
            status=EnrollmentStatus(self.event_status),
            enrolled_at=_parse_datetime(self.enrolled_at),
        )


class NotificationModel(Base):
    """ORM model for notifications table."""

    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(String(50), nullable=False)

    __table_args__ = (Index("idx_notifications_volunteer", "volunteer_id"),)

    def to_domain(self) -> Notification:
        """Convert ORM model to domain model.

        Returns:
            Notification: Domain model instance
        """
        return Notification(
            notification_id=self.id,
            volunteer_id=self.volunteer_id,
            message=self.message,
            is_read=bool(self.is_read),
            created_at=_parse_datetime(self.created_at),
        )


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string for database storage.

    Args:
        dt: Datetime object (naive values are treated as UTC)

    Returns:
        ISO 8601 formatted string or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 string to a UTC datetime."""
    return parse_iso_datetime(dt_str)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)

        from sqlalchemy import inspect
        inspector = inspect(engine)
        tables = inspector.get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")

    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
