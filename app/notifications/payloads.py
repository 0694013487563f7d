"""Template context for notification emails."""

from datetime import datetime
from typing import Dict, Optional

from app.domain.models import Volunteer
from app.utils.timestamps import format_timestamp, utc_now


def build_notification_context(
    volunteer: Volunteer,
    message: str,
    sent_at: Optional[datetime] = None,
) -> Dict:
    """Build the Jinja2 context for a notification email.

    Args:
        volunteer: Recipient volunteer
        message: Notification text
        sent_at: Timestamp shown in the email (defaults to now)

    Returns:
        Dictionary with keys:
        - volunteer_id: Recipient id
        - volunteer_name: Display name, "Volunteer" when unknown
        - message: Notification text
        - location: Volunteer location, None when blank
        - skills: Volunteer skills
        - sent_at: ISO formatted timestamp
    """
    return {
        "volunteer_id": volunteer.volunteer_id,
        "volunteer_name": volunteer.full_name or "Volunteer",
        "message": message,
        "location": volunteer.location or None,
        "skills": list(volunteer.skills),
        "sent_at": format_timestamp(sent_at or utc_now()),
    }
