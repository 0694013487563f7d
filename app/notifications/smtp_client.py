"""SMTP client wrapper for email delivery.

Port 465 connects with implicit TLS; any other port connects in plain text
and upgrades with STARTTLS when use_tls is set.
"""

import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from email_validator import EmailNotValidError, validate_email

from app.config.environment import EnvironmentConfig
from app.logging import get_logger

from .models import SMTPDeliveryError

logger = get_logger(__name__, component="smtp")

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib for sending email messages.

    The smtplib classes are injectable so tests can substitute mocks.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
        timeout: float = 30.0,
    ):
        """Initialize SMTP client.

        Args:
            smtp_factory: Factory for plain SMTP connections (defaults to smtplib.SMTP)
            smtp_ssl_factory: Factory for implicit-TLS connections (defaults to smtplib.SMTP_SSL)
            timeout: Socket timeout in seconds
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL
        self.timeout = timeout

    def send(
        self,
        message: EmailMessage,
        env_config: EnvironmentConfig,
        use_tls: bool = True,
    ) -> None:
        """Send an email message via SMTP.

        Args:
            message: Fully constructed EmailMessage to send
            env_config: Environment configuration with SMTP settings
            use_tls: Whether to upgrade plain connections with STARTTLS

        Raises:
            SMTPDeliveryError: If message delivery fails
        """
        if not env_config.smtp_configured:
            raise SMTPDeliveryError("SMTP_HOST and SMTP_PORT must be set to send email")

        smtp = None
        try:
            smtp = self._connect(env_config, use_tls)

            if env_config.smtp_user and env_config.smtp_pass:
                smtp.login(env_config.smtp_user, env_config.smtp_pass)

            smtp.send_message(message)
            logger.debug(
                f"Message sent to {message['To']}",
                extra={"event": "smtp.sent", "smtp_host": env_config.smtp_host},
            )

        except smtplib.SMTPException as e:
            raise SMTPDeliveryError(f"SMTP error during message delivery: {e}") from e
        except OSError as e:
            raise SMTPDeliveryError(f"Network error during SMTP connection: {e}") from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

    def _connect(self, env_config: EnvironmentConfig, use_tls: bool):
        host, port = env_config.smtp_host, env_config.smtp_port

        if port == IMPLICIT_TLS_PORT:
            logger.debug(f"Connecting to {host}:{port} with implicit TLS")
            return self.smtp_ssl_factory(
                host, port, timeout=self.timeout, context=ssl.create_default_context()
            )

        logger.debug(f"Connecting to {host}:{port}")
        smtp = self.smtp_factory(host, port, timeout=self.timeout)
        if use_tls:
            smtp.starttls(context=ssl.create_default_context())
        return smtp


def validate_recipient(address: Optional[str]) -> str:
    """Validate and normalize a volunteer's email address.

    Args:
        address: Raw address from the volunteer profile

    Returns:
        Normalized address

    Raises:
        ValueError: If the address is missing or invalid
    """
    if not address or not address.strip():
        raise ValueError("Volunteer has no email address")

    try:
        return validate_email(address.strip(), check_deliverability=False).normalized
    except EmailNotValidError as e:
        raise ValueError(f"Invalid volunteer email address '{address}': {e}") from e


def build_sender_address(env_config: EnvironmentConfig) -> str:
    """Build the 'From' address for outgoing emails.

    Uses SMTP_USER as the address when set, otherwise noreply@<SMTP_HOST>.

    Returns:
        Formatted sender address (e.g., "Volunteer Matcher <user@example.com>")
    """
    sender_email = env_config.smtp_user or f"noreply@{env_config.smtp_host}"
    return f"{env_config.smtp_sender_name} <{sender_email}>"
