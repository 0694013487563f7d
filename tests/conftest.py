"""Shared fixtures for the test suite."""

import logging
from datetime import datetime, timezone

import pytest

from app.domain.models import Event, Volunteer
from app.logging.context import clear_log_context
from app.persistence.database import close_database
from app.persistence.memory_store import InMemoryDataStore
from app.persistence.sql_store import SQLDataStore

# Before every scenario event, so they all count as upcoming
SCENARIO_NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)

ENV_VARS = (
    "DATABASE_URL",
    "STORAGE_BACKEND",
    "USE_DB",
    "LOG_LEVEL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SENDER_NAME",
    "ENVIRONMENT",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Start every test without any of the application's environment variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Restore root logger handlers and clear log context after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    clear_log_context()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """SMTP settings for tests that exercise email delivery."""
    monkeypatch.setenv("SMTP_HOST", "smtp.test.com")
    monkeypatch.setenv("SMTP_PORT", "587")
    monkeypatch.setenv("SMTP_USER", "matcher@test.com")
    monkeypatch.setenv("SMTP_PASS", "testpass")


@pytest.fixture
def scenario_clock():
    """Clock pinned to SCENARIO_NOW."""
    return lambda: SCENARIO_NOW


@pytest.fixture
def houston_volunteer():
    """Volunteer from the reference scenario: Houston, first-aid, tag-A, January."""
    return Volunteer(
        volunteer_id=1,
        full_name="Ada Lovelace",
        email="ada@example.org",
        location="Houston",
        skills=["first-aid", "driving"],
        preferences=["tag-A"],
        availability={"start": "2024-01-01T00:00:00Z", "end": "2024-01-31T00:00:00Z"},
    )


@pytest.fixture
def houston_event():
    """Event scoring 4 for houston_volunteer."""
    return Event(
        event_id=10,
        name="Food Bank Drive",
        location="Houston",
        required_skills=["first-aid"],
        start_time="2024-01-10T09:00:00Z",
        end_time="2024-01-11T17:00:00Z",
        preference_tag="tag-A",
    )


@pytest.fixture
def dallas_event():
    """Event scoring 0 for houston_volunteer."""
    return Event(
        event_id=11,
        name="Dallas Cleanup",
        location="Dallas",
        required_skills=["carpentry"],
        start_time="2024-03-01T09:00:00Z",
        end_time="2024-03-01T17:00:00Z",
        preference_tag="tag-B",
    )


@pytest.fixture
def memory_store():
    store = InMemoryDataStore()
    yield store
    store.close()


@pytest.fixture
def sql_store():
    store = SQLDataStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each DataStore backend in turn."""
    if request.param == "memory":
        data_store = InMemoryDataStore()
    else:
        data_store = SQLDataStore("sqlite:///:memory:")
    yield data_store
    data_store.close()
    close_database()


@pytest.fixture
def seeded_store(store, houston_volunteer, houston_event, dallas_event):
    store.save_volunteer(houston_volunteer)
    store.save_event(houston_event)
    store.save_event(dallas_event)
    return store
