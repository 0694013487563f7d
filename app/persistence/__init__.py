"""Persistence layer: the DataStore contract and its adapters.

Public API:
    # Store selection
    - create_data_store(storage_config, env_config) -> DataStore
    - DataStore: abstract data-access contract
    - SQLDataStore: SQLAlchemy-backed adapter
    - InMemoryDataStore: process-local adapter

    # Database initialization and session management (sql backend)
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes (session-bound)
    - VolunteerRepository, EventRepository, EnrollmentRepository,
      NotificationRepository

    # Seed data
    - load_seed_file(path), seed_store(store, path)

    # Exceptions
    - PersistenceError, DatabaseConnectionError, RecordNotFoundError,
      DataIntegrityError

Example usage:
    >>> from app.persistence import SQLDataStore
    >>> store = SQLDataStore("sqlite:///./data/volunteer_matcher.db")
    >>> store.get_volunteer(1)
"""

from .base import DataStore
from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .factory import create_data_store
from .memory_store import InMemoryDataStore
from .repositories import (
    EnrollmentRepository,
    EventRepository,
    NotificationRepository,
    VolunteerRepository,
)
from .seed import load_seed_file, seed_store
from .sql_store import SQLDataStore

__all__ = [
    # Stores
    "DataStore",
    "SQLDataStore",
    "InMemoryDataStore",
    "create_data_store",
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "VolunteerRepository",
    "EventRepository",
    "EnrollmentRepository",
    "NotificationRepository",
    # Seed data
    "load_seed_file",
    "seed_store",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
