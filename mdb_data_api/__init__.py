"""
MDB_DATA_API - MongoDB Data API replacement

HTTP facade that serves the Atlas Data API contract (findOne, find,
insertOne, insertMany, updateOne, updateMany, deleteOne, deleteMany,
aggregate) on top of a pooled Motor client.
"""

from .config import ConnectionSettings, ServerSettings
from .core import ConnectionManager
from .exceptions import (
    ConfigurationError,
    DataApiError,
    DatabaseConnectionError,
    NotConnectedError,
)
from .handlers import DataApiHandlers, OperationResult
from .routing import create_app

__version__ = "1.0.0"

__all__ = [
    # Core
    "ConnectionManager",
    "DataApiHandlers",
    "OperationResult",
    "create_app",
    # Configuration
    "ServerSettings",
    "ConnectionSettings",
    # Exceptions
    "DataApiError",
    "ConfigurationError",
    "DatabaseConnectionError",
    "NotConnectedError",
]
