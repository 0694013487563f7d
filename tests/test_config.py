"""Integration tests for configuration module."""

import warnings
from pathlib import Path

import pytest

from app.config import ConfigurationError, load_config, validate_config_file
from app.config.environment import EnvironmentConfig, load_environment_config
from app.config.models import AppConfig, StorageConfig
from app.config.validators import check_for_warnings

# Test fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"


class TestConfigurationLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, mock_env_vars):
        """Test loading a valid configuration file."""
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            app_config, env_config = load_config(FIXTURES_DIR / "valid_config.yaml")

        # Backend names are case-insensitive
        assert app_config.storage.backend == "memory"
        assert app_config.storage.database_url == "sqlite:///./ignored.db"

        assert app_config.email.enabled is False
        assert app_config.email.max_retries == 2
        assert app_config.email.retry_initial_delay == 1
        assert app_config.email.use_tls is True

        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"

        assert env_config.smtp_host == "smtp.test.com"
        assert env_config.smtp_port == 587

    def test_load_minimal_config(self):
        """Test loading a minimal configuration with defaults."""
        app_config, _ = load_config(FIXTURES_DIR / "minimal_config.yaml")

        assert app_config.storage.backend == "sql"
        assert app_config.storage.database_url == "sqlite:///./data/volunteer_matcher.db"
        assert app_config.email.enabled is False
        assert app_config.email.async_delivery is True
        assert app_config.logging.level == "WARNING"
        assert app_config.logging.format == "key-value"

    def test_defaults_without_config_file(self, tmp_path, monkeypatch):
        """Test that built-in defaults apply when no config file is found."""
        monkeypatch.chdir(tmp_path)

        app_config, env_config = load_config()

        assert app_config == AppConfig()
        assert env_config.environment == "development"

    def test_default_location_is_used(self, tmp_path, monkeypatch):
        """Test that ./config/config.yaml is picked up when present."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text("logging:\n  level: ERROR\n")

        app_config, _ = load_config()

        assert app_config.logging.level == "ERROR"

    def test_empty_config_file(self, tmp_path):
        """Test that an empty file yields defaults."""
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("")

        app_config, _ = load_config(config_file)

        assert app_config == AppConfig()

    def test_missing_explicit_config_file(self, tmp_path):
        """Test error when an explicit config file doesn't exist."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(tmp_path / "nonexistent.yaml")

        assert "not found" in str(exc_info.value)

    def test_invalid_config_reports_every_field(self):
        """Test that all validation errors are reported together."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(FIXTURES_DIR / "invalid_config.yaml")

        error_str = str(exc_info.value)
        assert "Configuration validation failed" in error_str
        assert "storage -> backend" in error_str
        assert "storage -> database_url" in error_str
        assert "notifications -> email -> max_retries" in error_str
        assert "logging -> format" in error_str
        assert "Suggestions:" in error_str

    def test_malformed_yaml(self, tmp_path):
        """Test error when YAML syntax is invalid."""
        config_file = tmp_path / "broken.yaml"
        config_file.write_text("storage: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_config(config_file)

    def test_non_mapping_config(self, tmp_path):
        """Test error when the top level is not a mapping."""
        config_file = tmp_path / "list.yaml"
        config_file.write_text("- storage\n- logging\n")

        with pytest.raises(ConfigurationError, match="YAML mapping"):
            load_config(config_file)

    def test_email_enabled_without_smtp_warns(self, tmp_path):
        """Test warning when email is enabled but SMTP is not configured."""
        config_file = tmp_path / "email.yaml"
        config_file.write_text("notifications:\n  email:\n    enabled: true\n")

        with pytest.warns(UserWarning, match="SMTP_HOST"):
            app_config, _ = load_config(config_file)

        assert app_config.email.enabled is True

    def test_example_config_is_valid(self, capsys):
        """Test that the shipped example configuration validates."""
        example = Path(__file__).parent.parent / "config.example.yaml"

        assert validate_config_file(example) is True
        assert "✓" in capsys.readouterr().out

    def test_validate_config_file_reports_failure(self, capsys):
        """Test validate_config_file on an invalid file."""
        assert validate_config_file(FIXTURES_DIR / "invalid_config.yaml") is False
        assert "✗" in capsys.readouterr().out


class TestStorageConfig:
    """Test storage settings validation."""

    def test_database_url_is_stripped(self):
        config = StorageConfig(database_url="  sqlite:///x.db  ")
        assert config.database_url == "sqlite:///x.db"

    def test_blank_database_url_rejected(self):
        with pytest.raises(ValueError):
            StorageConfig(database_url="   ")


class TestEnvironmentConfig:
    """Test environment variable loading."""

    def test_no_variables(self):
        env_config = load_environment_config()

        assert env_config.smtp_configured is False
        assert env_config.storage_backend is None
        assert env_config.database_url is None
        assert env_config.log_level is None
        assert env_config.smtp_sender_name == "Volunteer Matcher"

    def test_smtp_variables(self, mock_env_vars):
        env_config = load_environment_config()

        assert env_config.smtp_configured is True
        assert env_config.smtp_user == "matcher@test.com"
        assert env_config.smtp_pass == "testpass"

    def test_invalid_smtp_port(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.test.com")
        monkeypatch.setenv("SMTP_PORT", "not-a-port")

        with pytest.raises(ConfigurationError, match="SMTP_PORT"):
            load_environment_config()

    def test_smtp_port_out_of_range(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.test.com")
        monkeypatch.setenv("SMTP_PORT", "70000")

        with pytest.raises(ConfigurationError, match="between 1 and 65535"):
            load_environment_config()

    def test_smtp_host_without_port(self, monkeypatch):
        monkeypatch.setenv("SMTP_HOST", "smtp.test.com")

        with pytest.raises(ConfigurationError, match="SMTP_PORT is not"):
            load_environment_config()

    def test_smtp_user_without_password(self, monkeypatch):
        monkeypatch.setenv("SMTP_USER", "someone")

        with pytest.raises(ConfigurationError, match="SMTP_PASS is not"):
            load_environment_config()

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert load_environment_config().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError, match="LOG_LEVEL"):
            load_environment_config()

    def test_storage_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", " Memory ")
        monkeypatch.setenv("DATABASE_URL", "sqlite:///env.db")

        env_config = load_environment_config()

        assert env_config.storage_backend == "memory"
        assert env_config.database_url == "sqlite:///env.db"

    def test_invalid_storage_backend(self, monkeypatch):
        monkeypatch.setenv("STORAGE_BACKEND", "cassandra")

        with pytest.raises(ConfigurationError, match="STORAGE_BACKEND"):
            load_environment_config()

    @pytest.mark.parametrize(
        "value,expected",
        [("1", "sql"), ("true", "sql"), ("TRUE", "sql"), ("0", "memory"), ("no", "memory")],
    )
    def test_use_db_flag(self, monkeypatch, value, expected):
        monkeypatch.setenv("USE_DB", value)
        assert load_environment_config().storage_backend == expected

    def test_storage_backend_wins_over_use_db(self, monkeypatch):
        monkeypatch.setenv("USE_DB", "1")
        monkeypatch.setenv("STORAGE_BACKEND", "memory")

        assert load_environment_config().storage_backend == "memory"

    def test_defaults(self):
        env_config = EnvironmentConfig(smtp_host="smtp.test.com")

        assert env_config.smtp_configured is False
        assert env_config.environment == "development"


class TestConfigWarnings:
    """Test non-fatal configuration warnings."""

    def test_memory_backend_warns(self):
        messages = check_for_warnings({"storage": {"backend": "memory"}})

        assert len(messages) == 1
        assert "lost" in messages[0]

    def test_memory_backend_with_database_url(self):
        messages = check_for_warnings(
            {"storage": {"backend": "MEMORY", "database_url": "sqlite:///x.db"}}
        )

        assert any("ignored" in m for m in messages)

    def test_sync_delivery_with_many_retries(self):
        messages = check_for_warnings(
            {"notifications": {"email": {"enabled": True, "async_delivery": False, "max_retries": 5}}}
        )

        assert len(messages) == 1
        assert "max_retries=5" in messages[0]

    def test_clean_config_has_no_warnings(self):
        assert check_for_warnings({}) == []
        assert check_for_warnings({"storage": {"backend": "sql"}}) == []
