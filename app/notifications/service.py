"""Notification service recording in-app messages and emailing them.

Flow for each notify() call:
1. Record the in-app notification through the DataStore
2. If email is enabled, SMTP is configured and the volunteer has an address,
   render the templates and build the message
3. Deliver with retry/backoff, on a background thread when async_delivery is set

notify() never raises. Every failure is logged and reported in the result.
"""

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from email.message import EmailMessage
from typing import Optional, Set, Tuple

from app.config.environment import EnvironmentConfig
from app.config.models import EmailConfig
from app.logging import get_logger, log_context
from app.persistence.base import DataStore
from app.persistence.exceptions import PersistenceError

from .base import NotificationSink
from .models import NotificationResult, NotificationTemplateError, SMTPDeliveryError
from .payloads import build_notification_context
from .smtp_client import SMTPClient, build_sender_address, validate_recipient
from .templates import TemplateRenderer

logger = get_logger(__name__, component="notification")

MAX_RETRY_DELAY = 60.0


class NotificationService(NotificationSink):
    """NotificationSink backed by the store, with optional email delivery."""

    def __init__(
        self,
        store: DataStore,
        email_config: Optional[EmailConfig] = None,
        env_config: Optional[EnvironmentConfig] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """Initialize notification service.

        Args:
            store: DataStore that records in-app notifications
            email_config: Email settings (email is disabled when None)
            env_config: Environment configuration with SMTP settings
            template_renderer: Template renderer (created on first use if None)
            smtp_client: SMTP client instance (creates default if None)
            executor: Executor for async delivery (created on first use if None)
        """
        self.store = store
        self.email_config = email_config or EmailConfig()
        self.env_config = env_config or EnvironmentConfig()
        self._template_renderer = template_renderer
        self.smtp_client = smtp_client or SMTPClient()
        self._executor = executor
        self._owns_executor = executor is None
        self._pending: Set[Future] = set()
        self._pending_lock = threading.Lock()

    @property
    def template_renderer(self) -> TemplateRenderer:
        if self._template_renderer is None:
            self._template_renderer = TemplateRenderer()
        return self._template_renderer

    @property
    def email_enabled(self) -> bool:
        return self.email_config.enabled and self.env_config.smtp_configured

    def notify(self, volunteer_id: int, message: str) -> NotificationResult:
        """Record a notification for a volunteer and email it when configured.

        Args:
            volunteer_id: Recipient volunteer
            message: Notification text

        Returns:
            NotificationResult describing what happened
        """
        with log_context(volunteer_id=volunteer_id):
            try:
                return self._notify(volunteer_id, message)
            except Exception as e:
                logger.error(
                    f"Unexpected error notifying volunteer {volunteer_id}: {e}",
                    exc_info=True,
                    extra={"event": "notification.failed", "error_type": type(e).__name__},
                )
                return NotificationResult(
                    volunteer_id=volunteer_id, status="failed", error=str(e)
                )

    def _notify(self, volunteer_id: int, message: str) -> NotificationResult:
        try:
            notification = self.store.add_notification(volunteer_id, message)
        except PersistenceError as e:
            logger.error(
                f"Failed to record notification for volunteer {volunteer_id}: {e}",
                extra={"event": "notification.record.failed", "error_type": "dependency"},
            )
            return NotificationResult(volunteer_id=volunteer_id, status="failed", error=str(e))

        logger.info(
            f"Recorded notification for volunteer {volunteer_id}",
            extra={
                "event": "notification.recorded",
                "notification_id": notification.notification_id,
            },
        )

        result = NotificationResult(
            volunteer_id=volunteer_id,
            status="recorded",
            notification_id=notification.notification_id,
        )

        if not self.email_enabled:
            return result

        email, error = self._build_email(volunteer_id, message)
        if email is None:
            result.email_status = "skipped" if error is None else "failed"
            result.error = error
            return result

        if self.email_config.async_delivery:
            self._track(self._get_executor().submit(self.deliver, email))
            result.email_status = "queued"
            return result

        attempts, error = self.deliver(email)
        result.attempts = attempts
        result.email_status = "sent" if error is None else "failed"
        result.error = error
        return result

    def _build_email(self, volunteer_id: int, message: str) -> Tuple[Optional[EmailMessage], Optional[str]]:
        """Build the email for a notification.

        Returns:
            (message, None) on success, (None, None) when the volunteer has no
            address, (None, error) when building failed
        """
        volunteer = self.store.get_volunteer(volunteer_id)
        if volunteer is None or not volunteer.email:
            logger.info(
                f"Skipping email for volunteer {volunteer_id} - no address on file",
                extra={"event": "notification.email.skip", "reason": "no_address"},
            )
            return None, None

        try:
            recipient = validate_recipient(volunteer.email)
            rendered = self.template_renderer.render(
                build_notification_context(volunteer, message)
            )
        except (ValueError, NotificationTemplateError) as e:
            logger.error(
                f"Failed to build email for volunteer {volunteer_id}: {e}",
                extra={"event": "notification.email.build_failed"},
            )
            return None, str(e)

        email = EmailMessage()
        email["Subject"] = rendered["subject"]
        email["From"] = build_sender_address(self.env_config)
        email["To"] = recipient
        email.set_content(rendered["text_body"])
        email.add_alternative(rendered["html_body"], subtype="html")
        return email, None

    def deliver(self, email: EmailMessage) -> Tuple[int, Optional[str]]:
        """Send an email with retry and exponential backoff.

        Returns:
            Tuple of (attempts made, last error or None on success)
        """
        max_attempts = self.email_config.max_retries + 1
        last_error = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = min(
                    self.email_config.retry_initial_delay
                    * (self.email_config.retry_backoff_multiplier ** (attempt - 2)),
                    MAX_RETRY_DELAY,
                )
                logger.warning(
                    f"Retrying delivery to {email['To']} (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "notification.send.attempt", "attempt": attempt},
                )
                time.sleep(delay)

            try:
                self.smtp_client.send(email, self.env_config, self.email_config.use_tls)
            except SMTPDeliveryError as e:
                last_error = str(e)
                logger.warning(
                    f"SMTP delivery failed (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "notification.send.failure",
                        "attempt": attempt,
                        "retry_remaining": attempt < max_attempts,
                    },
                )
                continue

            logger.info(
                f"Notification email sent to {email['To']} (attempts: {attempt})",
                extra={"event": "notification.send.success", "attempt": attempt},
            )
            return attempt, None

        logger.error(
            f"SMTP delivery to {email['To']} failed after {max_attempts} attempts: {last_error}",
            extra={
                "event": "notification.send.failure",
                "attempts": max_attempts,
                "retry_remaining": False,
            },
        )
        return max_attempts, last_error

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=2, thread_name_prefix="notification-email"
            )
        return self._executor

    def _track(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.add(future)
        # Runs immediately if the delivery already finished
        future.add_done_callback(self._delivery_finished)

    def _delivery_finished(self, future: Future) -> None:
        """Release a finished delivery and log anything deliver() let escape."""
        with self._pending_lock:
            self._pending.discard(future)

        if future.cancelled():
            logger.warning(
                "Queued notification email was cancelled before delivery",
                extra={"event": "notification.send.cancelled"},
            )
            return

        error = future.exception()
        if error is not None:
            logger.error(
                f"Background email delivery crashed: {error}",
                exc_info=(type(error), error, error.__traceback__),
                extra={"event": "notification.send.failure", "error_type": type(error).__name__},
            )

    @property
    def pending_count(self) -> int:
        """Number of queued email deliveries that have not finished yet."""
        with self._pending_lock:
            return len(self._pending)

    def wait_for_pending(self, timeout: Optional[float] = None) -> bool:
        """Block until queued email deliveries finish.

        Returns:
            True if every delivery finished within the timeout
        """
        with self._pending_lock:
            pending = list(self._pending)
        _, not_done = wait_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop the delivery executor, optionally waiting for queued emails."""
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=wait)
            self._executor = None
