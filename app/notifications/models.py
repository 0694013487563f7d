"""Result types and exceptions for the notification pipeline."""

from dataclasses import dataclass
from typing import Optional


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when SMTP delivery fails."""

    pass


@dataclass
class NotificationResult:
    """Outcome of notifying a volunteer.

    Attributes:
        volunteer_id: Recipient volunteer
        status: "recorded" if the in-app notification was stored, else "failed"
        notification_id: Id assigned by the store, when recorded
        email_status: One of "disabled", "skipped", "queued", "sent", "failed"
        attempts: SMTP attempts made synchronously
        error: Error message for the first failure encountered
    """

    volunteer_id: int
    status: str  # "recorded", "failed"
    notification_id: Optional[int] = None
    email_status: str = "disabled"
    attempts: int = 0
    error: Optional[str] = None

    def is_success(self) -> bool:
        """Whether the in-app notification was stored."""
        return self.status == "recorded"
