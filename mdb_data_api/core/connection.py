"""
Connection management for the Data API.

This module owns the process's single MongoDB client and a cache of
per-database handles. The manager is constructed by the application's
startup routine and injected into the router and handlers.

This module is part of MDB_DATA_API.
"""

import asyncio
import logging
import time

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import InvalidOperation, PyMongoError

from ..config import ConnectionSettings
from ..exceptions import DatabaseConnectionError, NotConnectedError
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class ConnectionManager:
    """
    Manages the MongoDB client lifecycle and database handle cache.

    The client is created lazily on the first ``connect`` and reused by
    every later request until ``close``. After ``close`` the next
    ``connect`` builds everything again.
    """

    def __init__(self, settings: ConnectionSettings | None = None) -> None:
        """
        Initialize the connection manager.

        Args:
            settings: Pool and timeout configuration (defaults if omitted)
        """
        self.settings = settings or ConnectionSettings()

        self._client: AsyncIOMotorClient | None = None
        self._databases: dict[str, AsyncIOMotorDatabase] = {}
        # Guards first-connect so concurrent first requests share one client
        self._connect_lock = asyncio.Lock()

    async def connect(self, uri: str) -> None:
        """
        Connect to MongoDB if no client exists yet.

        Creates the client with the configured pool size and timeouts and
        verifies it with a ``ping``. Calling it while connected is a no-op.

        Args:
            uri: MongoDB connection string

        Raises:
            DatabaseConnectionError: If the cluster cannot be reached
        """
        if self._client is not None:
            return

        async with self._connect_lock:
            if self._client is not None:
                return

            start_time = time.time()
            contextual_logger.info(
                "Connecting to MongoDB",
                extra={
                    "max_pool_size": self.settings.max_pool_size,
                    "server_selection_timeout_ms": self.settings.server_selection_timeout_ms,
                    "socket_timeout_ms": self.settings.socket_timeout_ms,
                },
            )

            client: AsyncIOMotorClient | None = None
            try:
                client = AsyncIOMotorClient(uri, **self.settings.client_options())
                await client.admin.command("ping")
            except (PyMongoError, ValueError, TypeError) as e:
                duration_ms = (time.time() - start_time) * 1000
                record_operation("connection.connect", duration_ms, success=False)
                contextual_logger.error(
                    "MongoDB connection failed",
                    extra={
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "duration_ms": round(duration_ms, 2),
                    },
                    exc_info=True,
                )
                if client is not None:
                    client.close()
                raise DatabaseConnectionError(
                    f"Failed to connect to MongoDB: {e}",
                    error_type=type(e).__name__,
                ) from e

            self._client = client
            duration_ms = (time.time() - start_time) * 1000
            record_operation("connection.connect", duration_ms, success=True)
            contextual_logger.info(
                "Connected to MongoDB",
                extra={"duration_ms": round(duration_ms, 2)},
            )

    def get_database(self, name: str) -> AsyncIOMotorDatabase:
        """
        Get a cached database handle, creating it on first use.

        Args:
            name: Database name

        Returns:
            AsyncIOMotorDatabase instance

        Raises:
            NotConnectedError: If ``connect`` has not succeeded
        """
        if self._client is None:
            raise NotConnectedError()

        database = self._databases.get(name)
        if database is None:
            database = self._client[name]
            self._databases[name] = database
        return database

    def get_collection(self, database: str, collection: str) -> AsyncIOMotorCollection:
        """Resolve a collection through the database handle cache."""
        return self.get_database(database)[collection]

    async def close(self) -> None:
        """
        Close the client and forget every cached handle.

        This method is idempotent - it's safe to call multiple times.
        """
        if self._client is None:
            return

        start_time = time.time()
        client, self._client = self._client, None
        self._databases.clear()
        try:
            client.close()
        except (InvalidOperation, RuntimeError) as e:
            logger.warning(f"Error closing MongoDB client: {e}")

        duration_ms = (time.time() - start_time) * 1000
        record_operation("connection.close", duration_ms, success=True)
        contextual_logger.info("Disconnected from MongoDB")

    def is_connected(self) -> bool:
        """Whether a client handle exists. Does not check network liveness."""
        return self._client is not None

    @property
    def client(self) -> AsyncIOMotorClient | None:
        """The underlying client, or None when not connected."""
        return self._client
