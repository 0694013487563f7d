"""Configuration schema models using Pydantic."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class StorageBackend(str, Enum):
    """Supported DataStore backends."""

    SQL = "sql"
    MEMORY = "memory"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


DEFAULT_DATABASE_URL = "sqlite:///./data/volunteer_matcher.db"


class StorageConfig(BaseModel):
    """Which DataStore to build at start-up and where it lives."""

    backend: StorageBackend = Field(
        StorageBackend.SQL, description="Storage backend (sql or memory)"
    )
    database_url: str = Field(
        DEFAULT_DATABASE_URL, min_length=1, description="SQLAlchemy database URL"
    )

    @field_validator("backend", mode="before")
    @classmethod
    def lowercase_backend(cls, v):
        """Accept backend names in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("database_url")
    @classmethod
    def strip_database_url(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("database_url cannot be empty")
        return stripped

    model_config = {"use_enum_values": True}


class EmailConfig(BaseModel):
    """Email notification settings."""

    enabled: bool = Field(False, description="Send match notifications by email")
    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    max_retries: int = Field(
        3, ge=0, le=10, description="Number of retry attempts for failed email sends"
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: int = Field(
        5, ge=1, le=60, description="Initial retry delay in seconds"
    )
    async_delivery: bool = Field(
        True, description="Deliver email on a background thread"
    )


class NotificationsConfig(BaseModel):
    """Notification channel settings."""

    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the Volunteer Matcher."""

    storage: StorageConfig = Field(
        default_factory=StorageConfig, description="Storage backend settings"
    )
    notifications: NotificationsConfig = Field(
        default_factory=NotificationsConfig, description="Notification settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @property
    def email(self) -> EmailConfig:
        """Shortcut to the email notification settings."""
        return self.notifications.email
