"""
Constants for MDB_DATA_API.

This module contains all shared constants used across the codebase to avoid
magic numbers and improve maintainability.
"""

from typing import Final

# ============================================================================
# SERVICE METADATA
# ============================================================================

SERVICE_NAME: Final[str] = "MongoDB Data API Replacement"
"""Human-readable service name reported by the root endpoint."""

SERVICE_VERSION: Final[str] = "1.0.0"
"""Service version reported by the root endpoint."""

SERVICE_FRAMEWORK: Final[str] = "FastAPI"
"""Web framework reported by the root endpoint."""

# ============================================================================
# DATABASE CONSTANTS
# ============================================================================

# Connection pool defaults
DEFAULT_MAX_POOL_SIZE: Final[int] = 10
"""Default maximum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_SOCKET_TIMEOUT_MS: Final[int] = 45000
"""Default socket timeout in milliseconds."""

DEFAULT_APP_NAME: Final[str] = "mdb-data-api"
"""Application name reported to the MongoDB server."""

# ============================================================================
# SERVER CONSTANTS
# ============================================================================

DEFAULT_HOST: Final[str] = "0.0.0.0"
"""Default listen host (all interfaces)."""

DEFAULT_PORT: Final[int] = 8080
"""Default listen port."""

DEFAULT_SHUTDOWN_GRACE_SECONDS: Final[int] = 5
"""Seconds uvicorn waits for in-flight requests before closing the database."""

REQUEST_ID_HEADER: Final[str] = "X-Request-ID"
"""Header carrying the request correlation ID."""

# ============================================================================
# ACTIONS
# ============================================================================

ACTION_FIND_ONE: Final[str] = "findOne"
ACTION_FIND: Final[str] = "find"
ACTION_INSERT_ONE: Final[str] = "insertOne"
ACTION_INSERT_MANY: Final[str] = "insertMany"
ACTION_UPDATE_ONE: Final[str] = "updateOne"
ACTION_UPDATE_MANY: Final[str] = "updateMany"
ACTION_DELETE_ONE: Final[str] = "deleteOne"
ACTION_DELETE_MANY: Final[str] = "deleteMany"
ACTION_AGGREGATE: Final[str] = "aggregate"

SUPPORTED_ACTIONS: Final[tuple[str, ...]] = (
    ACTION_FIND_ONE,
    ACTION_FIND,
    ACTION_INSERT_ONE,
    ACTION_INSERT_MANY,
    ACTION_UPDATE_ONE,
    ACTION_UPDATE_MANY,
    ACTION_DELETE_ONE,
    ACTION_DELETE_MANY,
    ACTION_AGGREGATE,
)
"""Action names accepted in the ``/action/{actionName}`` path segment."""

# Envelope fields checked by the router, in check order
REQUIRED_ENVELOPE_FIELDS: Final[tuple[str, ...]] = ("dataSource", "database", "collection")

# ============================================================================
# ERROR CODES
# ============================================================================

ERROR_INVALID_REQUEST: Final[str] = "INVALID_REQUEST"
ERROR_MONGODB_URI_MISSING: Final[str] = "MONGODB_URI_MISSING"
ERROR_MISSING_ACTION: Final[str] = "MISSING_ACTION"
ERROR_INVALID_ACTION: Final[str] = "INVALID_ACTION"
ERROR_INTERNAL: Final[str] = "INTERNAL_ERROR"

ERROR_FIND_ONE: Final[str] = "FIND_ONE_ERROR"
ERROR_FIND: Final[str] = "FIND_ERROR"
ERROR_INSERT_ONE: Final[str] = "INSERT_ONE_ERROR"
ERROR_INSERT_MANY: Final[str] = "INSERT_MANY_ERROR"
ERROR_UPDATE_ONE: Final[str] = "UPDATE_ONE_ERROR"
ERROR_UPDATE_MANY: Final[str] = "UPDATE_MANY_ERROR"
ERROR_DELETE_ONE: Final[str] = "DELETE_ONE_ERROR"
ERROR_DELETE_MANY: Final[str] = "DELETE_MANY_ERROR"
ERROR_AGGREGATE: Final[str] = "AGGREGATE_ERROR"
