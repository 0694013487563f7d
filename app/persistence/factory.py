"""Factory function for instantiating the configured storage backend."""

from app.config.environment import EnvironmentConfig
from app.config.models import StorageBackend, StorageConfig
from app.logging import get_logger

from .base import DataStore
from .exceptions import DatabaseConnectionError
from .memory_store import InMemoryDataStore
from .sql_store import SQLDataStore

logger = get_logger(__name__, component="database")


def create_data_store(storage_config: StorageConfig, env_config: EnvironmentConfig) -> DataStore:
    """Create the DataStore selected by configuration.

    Environment overrides (STORAGE_BACKEND, USE_DB, DATABASE_URL) have already
    been folded into env_config by load_environment_config(); they take
    precedence over the config file.

    Args:
        storage_config: Storage section of the application config
        env_config: Environment configuration

    Returns:
        Ready-to-use DataStore

    Raises:
        DatabaseConnectionError: If the backend is unknown or cannot be initialized

    Example:
        >>> store = create_data_store(StorageConfig(backend="memory"), env_config)
        >>> store.backend_name
        'memory'
    """
    backend_map = {
        StorageBackend.SQL.value: _create_sql_store,
        StorageBackend.MEMORY.value: _create_memory_store,
    }

    backend = env_config.storage_backend or storage_config.backend
    backend = backend.value if isinstance(backend, StorageBackend) else str(backend).lower()

    builder = backend_map.get(backend)
    if builder is None:
        supported = ", ".join(sorted(backend_map.keys()))
        raise DatabaseConnectionError(
            f"Unknown storage backend: {backend}. Supported backends: {supported}"
        )

    logger.debug(
        "Creating data store",
        extra={"event": "store.creating", "backend": backend},
    )
    return builder(storage_config, env_config)


def _create_sql_store(storage_config: StorageConfig, env_config: EnvironmentConfig) -> DataStore:
    database_url = env_config.database_url or storage_config.database_url
    return SQLDataStore(database_url)


def _create_memory_store(storage_config: StorageConfig, env_config: EnvironmentConfig) -> DataStore:
    return InMemoryDataStore()
