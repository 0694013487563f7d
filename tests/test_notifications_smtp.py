"""Unit tests for SMTP client wrapper.

Tests the SMTPClient for:
- Connection handling (SMTP and SMTP_SSL)
- TLS/STARTTLS negotiation
- Authentication (with and without credentials)
- Error handling and exceptions
- Recipient validation
- Sender address building
"""

import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock, Mock

import pytest

from app.config.environment import EnvironmentConfig
from app.notifications.models import SMTPDeliveryError
from app.notifications.smtp_client import (
    SMTPClient,
    build_sender_address,
    validate_recipient,
)


@pytest.fixture
def env_config_with_auth():
    """Environment config with SMTP authentication."""
    return EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=587,
        smtp_user="user@example.com",
        smtp_pass="secret123",
        smtp_sender_name="Food Bank Volunteers",
    )


@pytest.fixture
def env_config_without_auth():
    """Environment config without SMTP authentication."""
    return EnvironmentConfig(smtp_host="smtp.example.com", smtp_port=25)


@pytest.fixture
def env_config_implicit_tls():
    """Environment config for implicit TLS (port 465)."""
    return EnvironmentConfig(
        smtp_host="smtp.gmail.com",
        smtp_port=465,
        smtp_user="user@gmail.com",
        smtp_pass="apppassword",
    )


@pytest.fixture
def sample_message():
    """Sample email message for testing."""
    msg = EmailMessage()
    msg["Subject"] = "You've been matched to Food Bank Drive!"
    msg["From"] = "sender@example.com"
    msg["To"] = "ada@example.org"
    msg.set_content("Test body")
    return msg


def test_smtp_client_initialization():
    """Test SMTPClient defaults to smtplib classes."""
    client = SMTPClient()
    assert client.smtp_factory is smtplib.SMTP
    assert client.smtp_ssl_factory is smtplib.SMTP_SSL
    assert client.timeout == 30.0


def test_smtp_client_send_with_starttls(env_config_with_auth, sample_message):
    """Test sending email with STARTTLS (port 587)."""
    mock_smtp = MagicMock()
    mock_factory = Mock(return_value=mock_smtp)

    client = SMTPClient(smtp_factory=mock_factory)
    client.send(sample_message, env_config_with_auth, use_tls=True)

    mock_factory.assert_called_once_with("smtp.example.com", 587, timeout=30.0)
    mock_smtp.starttls.assert_called_once()
    mock_smtp.login.assert_called_once_with("user@example.com", "secret123")
    mock_smtp.send_message.assert_called_once_with(sample_message)
    mock_smtp.quit.assert_called_once()


def test_smtp_client_send_with_implicit_tls(env_config_implicit_tls, sample_message):
    """Test sending email with implicit TLS (port 465)."""
    mock_smtp = MagicMock()
    mock_factory = Mock()
    mock_ssl_factory = Mock(return_value=mock_smtp)

    client = SMTPClient(smtp_factory=mock_factory, smtp_ssl_factory=mock_ssl_factory)
    client.send(sample_message, env_config_implicit_tls, use_tls=True)

    mock_factory.assert_not_called()
    call_args = mock_ssl_factory.call_args
    assert call_args[0] == ("smtp.gmail.com", 465)
    assert "context" in call_args[1]

    # Already encrypted, so no STARTTLS
    mock_smtp.starttls.assert_not_called()
    mock_smtp.login.assert_called_once_with("user@gmail.com", "apppassword")
    mock_smtp.quit.assert_called_once()


def test_smtp_client_send_without_auth(env_config_without_auth, sample_message):
    """Test sending email without authentication."""
    mock_smtp = MagicMock()
    mock_factory = Mock(return_value=mock_smtp)

    client = SMTPClient(smtp_factory=mock_factory)
    client.send(sample_message, env_config_without_auth, use_tls=False)

    mock_smtp.starttls.assert_not_called()
    mock_smtp.login.assert_not_called()
    mock_smtp.send_message.assert_called_once_with(sample_message)


def test_smtp_client_requires_configuration(sample_message):
    """Test that sending without SMTP_HOST/SMTP_PORT fails before connecting."""
    mock_factory = Mock()
    client = SMTPClient(smtp_factory=mock_factory)

    with pytest.raises(SMTPDeliveryError, match="SMTP_HOST"):
        client.send(sample_message, EnvironmentConfig())

    mock_factory.assert_not_called()


def test_smtp_client_handles_smtp_exception(env_config_with_auth, sample_message):
    """Test that SMTP exceptions are wrapped and the connection is closed."""
    mock_smtp = MagicMock()
    mock_smtp.send_message.side_effect = smtplib.SMTPException("Connection failed")
    mock_factory = Mock(return_value=mock_smtp)

    client = SMTPClient(smtp_factory=mock_factory)

    with pytest.raises(SMTPDeliveryError) as exc_info:
        client.send(sample_message, env_config_with_auth, use_tls=True)

    assert "SMTP error" in str(exc_info.value)
    mock_smtp.quit.assert_called_once()


def test_smtp_client_handles_network_error(env_config_with_auth, sample_message):
    """Test that network errors are wrapped in SMTPDeliveryError."""
    mock_factory = Mock(side_effect=OSError("Network unreachable"))

    client = SMTPClient(smtp_factory=mock_factory)

    with pytest.raises(SMTPDeliveryError) as exc_info:
        client.send(sample_message, env_config_with_auth, use_tls=True)

    assert "Network error" in str(exc_info.value)


def test_smtp_client_ignores_quit_failure(env_config_with_auth, sample_message):
    """Test that an error while closing does not mask a successful send."""
    mock_smtp = MagicMock()
    mock_smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

    client = SMTPClient(smtp_factory=Mock(return_value=mock_smtp))
    client.send(sample_message, env_config_with_auth)

    mock_smtp.send_message.assert_called_once()


def test_validate_recipient_normalizes():
    """Test that a valid address is trimmed and normalized."""
    assert validate_recipient("  ada@EXAMPLE.org ") == "ada@example.org"


@pytest.mark.parametrize("address", [None, "", "   "])
def test_validate_recipient_missing(address):
    """Test that a missing address is rejected."""
    with pytest.raises(ValueError, match="no email address"):
        validate_recipient(address)


def test_validate_recipient_invalid():
    """Test that a malformed address is rejected."""
    with pytest.raises(ValueError, match="Invalid volunteer email address"):
        validate_recipient("not-an-email")


def test_build_sender_address_with_smtp_user(env_config_with_auth):
    """Test sender address uses SMTP_USER."""
    assert build_sender_address(env_config_with_auth) == "Food Bank Volunteers <user@example.com>"


def test_build_sender_address_without_smtp_user(env_config_without_auth):
    """Test sender address falls back to noreply@host and default name."""
    assert (
        build_sender_address(env_config_without_auth)
        == "Volunteer Matcher <noreply@smtp.example.com>"
    )
