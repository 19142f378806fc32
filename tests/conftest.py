"""
Pytest configuration and shared fixtures for MDB_DATA_API tests.

This module provides:
- Mock Motor collection / cursor fixtures
- A mocked ConnectionManager for handler and routing tests
- Settings factories
- Testcontainers fixtures for integration tests against a real MongoDB
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from motor.motor_asyncio import AsyncIOMotorCollection

from mdb_data_api.config import ConnectionSettings, ServerSettings
from mdb_data_api.core.connection import ConnectionManager
from mdb_data_api.handlers.operations import DataApiHandlers
from mdb_data_api.observability import get_metrics_collector

# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_cursor(documents: list[dict[str, Any]] | None = None) -> MagicMock:
    """Create a mock Motor cursor whose chainable methods return itself."""
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.skip.return_value = cursor
    cursor.limit.return_value = cursor
    cursor.to_list = AsyncMock(return_value=documents or [])
    return cursor


@pytest.fixture
def mock_collection() -> MagicMock:
    """Create a mock Motor collection with async CRUD methods."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = "users"
    collection.find_one = AsyncMock(return_value=None)
    collection.find = MagicMock(return_value=make_cursor())
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="test_id"))
    collection.insert_many = AsyncMock(return_value=MagicMock(inserted_ids=["id1", "id2"]))
    collection.update_one = AsyncMock(
        return_value=MagicMock(matched_count=1, modified_count=1, upserted_id=None)
    )
    collection.update_many = AsyncMock(
        return_value=MagicMock(matched_count=2, modified_count=2, upserted_id=None)
    )
    collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
    collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=2))
    collection.aggregate = MagicMock(return_value=make_cursor())
    return collection


@pytest.fixture
def mock_connection_manager(mock_collection: MagicMock) -> MagicMock:
    """Create a connected mock ConnectionManager that serves mock_collection."""
    manager = MagicMock(spec=ConnectionManager)
    manager.is_connected.return_value = True
    manager.connect = AsyncMock()
    manager.close = AsyncMock()
    manager.get_collection.return_value = mock_collection
    return manager


@pytest.fixture
def handlers(mock_connection_manager: MagicMock) -> DataApiHandlers:
    """DataApiHandlers wired to the mock ConnectionManager."""
    return DataApiHandlers(mock_connection_manager)


@pytest.fixture
def envelope() -> dict[str, Any]:
    """Minimal valid request envelope."""
    return {"dataSource": "Cluster0", "database": "test_db", "collection": "users"}


# ============================================================================
# SETTINGS FIXTURES
# ============================================================================


@pytest.fixture
def server_settings() -> ServerSettings:
    """Server settings with a (fake) connection string configured."""
    return ServerSettings(
        mongodb_uri="mongodb://localhost:27017",
        connection=ConnectionSettings(max_pool_size=5),
    )


# ============================================================================
# ENVIRONMENT / GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Reset environment variables before each test."""
    env_vars_to_clear = [
        "MONGODB_URI",
        "HOST",
        "PORT",
        "LOG_LEVEL",
        "ENVIRONMENT",
        "NODE_ENV",
        "COERCE_OBJECT_IDS",
        "SHUTDOWN_GRACE_SECONDS",
        "MONGO_MAX_POOL_SIZE",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MONGO_SOCKET_TIMEOUT_MS",
        "MONGO_APP_NAME",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with an empty global metrics collector."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: container starts once and is reused for all integration tests.
    """
    try:
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    container = MongoDbContainer(image="mongo:7.0")
    try:
        container.start()
    except Exception as e:  # Docker missing or not running
        pytest.skip(f"MongoDB container unavailable: {e}")

    yield container
    container.stop()


@pytest.fixture
def mongodb_connection_string(mongodb_container) -> str:
    """Connection string for the test container."""
    return mongodb_container.get_connection_url()


@pytest.fixture
def cursor_factory():
    """Factory for mock Motor cursors over a fixed document list."""
    return make_cursor
