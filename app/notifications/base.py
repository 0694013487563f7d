"""Notification sink contract used by the matching engine."""

from abc import ABC, abstractmethod


class NotificationSink(ABC):
    """Receives one message per successful match."""

    @abstractmethod
    def notify(self, volunteer_id: int, message: str):
        """Deliver a message to a volunteer.

        Implementations may raise; callers treat any exception as a
        dependency failure.
        """
