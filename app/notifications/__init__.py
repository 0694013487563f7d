"""Notifications for volunteers matched to events.

This module provides:
- NotificationSink: contract the matching engine notifies through
- NotificationService: records in-app notifications and emails them
- NotificationResult: outcome of a notify() call
- TemplateRenderer: Jinja2-based email template rendering
- SMTPClient: SMTP wrapper with TLS/SSL support
"""

from .base import NotificationSink
from .models import (
    NotificationError,
    NotificationResult,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .payloads import build_notification_context
from .service import NotificationService
from .smtp_client import SMTPClient, build_sender_address, validate_recipient
from .templates import TemplateRenderer

__all__ = [
    # Sink contract and service
    "NotificationSink",
    "NotificationService",
    # Models and results
    "NotificationResult",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Utilities
    "build_notification_context",
    "build_sender_address",
    "validate_recipient",
]
