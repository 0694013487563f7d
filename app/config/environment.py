"""Environment variable loading and validation."""

import os
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_STORAGE_BACKENDS = ["sql", "memory"]
TRUTHY_USE_DB = ("1", "true")


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_user: Optional[str] = None,
        smtp_pass: Optional[str] = None,
        smtp_sender_name: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
        storage_backend: Optional[str] = None,
        environment: Optional[str] = None,
    ):
        """Initialize environment configuration.

        Unset values stay None so the config file (or its defaults) applies.
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.smtp_sender_name = smtp_sender_name or "Volunteer Matcher"
        self.log_level = log_level
        self.database_url = database_url
        self.storage_backend = storage_backend
        self.environment = environment or "development"

    @property
    def smtp_configured(self) -> bool:
        """True when enough SMTP settings are present to attempt delivery."""
        return bool(self.smtp_host and self.smtp_port)


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    All variables are optional:
    - DATABASE_URL: SQLAlchemy URL for the sql backend
    - STORAGE_BACKEND: sql or memory (wins over USE_DB)
    - USE_DB: legacy switch; "1"/"true" selects sql, any other value selects memory
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - SMTP_HOST, SMTP_PORT: SMTP server for email notifications
    - SMTP_USER, SMTP_PASS: SMTP authentication (both or neither)
    - SMTP_SENDER_NAME: Display name for email sender
    - ENVIRONMENT: Deployment environment attached to log records

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If any variable is set to an invalid value
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST") or None
    smtp_port_str = os.getenv("SMTP_PORT")
    smtp_user = os.getenv("SMTP_USER") or None
    smtp_pass = os.getenv("SMTP_PASS") or None
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("DATABASE_URL") or None
    storage_backend_str = os.getenv("STORAGE_BACKEND")
    use_db = os.getenv("USE_DB")
    environment = os.getenv("ENVIRONMENT")

    # Validate SMTP_PORT is numeric and in valid range
    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(
                    f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535."
                )
        except ValueError:
            errors.append(
                f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer."
            )

    if smtp_host and not smtp_port_str:
        errors.append("SMTP_HOST is set but SMTP_PORT is not. Both are needed for email.")

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()
    else:
        log_level = None

    storage_backend = _resolve_storage_backend(storage_backend_str, use_db, errors)

    # Validate SMTP authentication consistency
    if smtp_user and not smtp_pass:
        errors.append(
            "SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication."
        )
    elif smtp_pass and not smtp_user:
        errors.append(
            "SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication."
        )

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and adjust the values",
                "Verify SMTP_PORT is a number between 1 and 65535",
                "Use STORAGE_BACKEND=sql or STORAGE_BACKEND=memory",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        smtp_sender_name=smtp_sender_name,
        log_level=log_level,
        database_url=database_url,
        storage_backend=storage_backend,
        environment=environment,
    )


def _resolve_storage_backend(
    storage_backend: Optional[str], use_db: Optional[str], errors: list
) -> Optional[str]:
    """
    Resolve the backend override from STORAGE_BACKEND and the legacy USE_DB flag.

    Args:
        storage_backend: Raw STORAGE_BACKEND value
        use_db: Raw USE_DB value
        errors: Error list to append validation problems to

    Returns:
        "sql", "memory", or None when neither variable is set
    """
    if storage_backend:
        backend = storage_backend.strip().lower()
        if backend not in VALID_STORAGE_BACKENDS:
            errors.append(
                f"Invalid STORAGE_BACKEND: '{storage_backend}'. "
                f"Must be one of: {', '.join(VALID_STORAGE_BACKENDS)}"
            )
            return None
        return backend

    if use_db is not None and use_db.strip() != "":
        return "sql" if use_db.strip().lower() in TRUTHY_USE_DB else "memory"

    return None
