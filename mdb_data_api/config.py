"""
Configuration management for MDB_DATA_API.

Settings are read from environment variables (optionally seeded from a
``.env`` file by the CLI). Both classes can also be built with direct
parameters, which is what the tests do.
"""

import os
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_APP_NAME,
    DEFAULT_HOST,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_PORT,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    DEFAULT_SOCKET_TIMEOUT_MS,
)
from .exceptions import ConfigurationError

_TRUTHY = ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{name} must be an integer", config_key=name, config_value=raw
        ) from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ConnectionSettings:
    """
    MongoDB client pool and timeout configuration.

    Passed to the ConnectionManager constructor; every value ends up as a
    keyword argument of ``AsyncIOMotorClient``.
    """

    max_pool_size: int = DEFAULT_MAX_POOL_SIZE
    server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS
    socket_timeout_ms: int = DEFAULT_SOCKET_TIMEOUT_MS
    app_name: str = DEFAULT_APP_NAME

    @classmethod
    def from_env(cls) -> "ConnectionSettings":
        return cls(
            max_pool_size=_env_int("MONGO_MAX_POOL_SIZE", DEFAULT_MAX_POOL_SIZE),
            server_selection_timeout_ms=_env_int(
                "MONGO_SERVER_SELECTION_TIMEOUT_MS", DEFAULT_SERVER_SELECTION_TIMEOUT_MS
            ),
            socket_timeout_ms=_env_int("MONGO_SOCKET_TIMEOUT_MS", DEFAULT_SOCKET_TIMEOUT_MS),
            app_name=os.getenv("MONGO_APP_NAME", DEFAULT_APP_NAME),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )
        if self.server_selection_timeout_ms < 1:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )
        if self.socket_timeout_ms < 0:
            raise ConfigurationError(
                f"socket_timeout_ms must be >= 0, got {self.socket_timeout_ms}",
                config_key="socket_timeout_ms",
                config_value=self.socket_timeout_ms,
            )

    def client_options(self) -> dict:
        """Keyword arguments for ``AsyncIOMotorClient``."""
        return {
            "maxPoolSize": self.max_pool_size,
            "serverSelectionTimeoutMS": self.server_selection_timeout_ms,
            "socketTimeoutMS": self.socket_timeout_ms,
            "appname": self.app_name,
        }


@dataclass(frozen=True)
class ServerSettings:
    """
    Data API server configuration.

    Example:
        # Using environment variables
        settings = ServerSettings.from_env()
        app = create_app(settings)

        # Or using direct parameters
        settings = ServerSettings(mongodb_uri="mongodb://localhost:27017")
    """

    mongodb_uri: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    coerce_object_ids: bool = True
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    connection: ConnectionSettings = field(default_factory=ConnectionSettings)

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """
        Load settings from environment variables.

        ``MONGODB_URI`` may be empty here: the server still starts and answers
        ``/health``, and ``/action/*`` reports ``MONGODB_URI_MISSING``.
        """
        production = os.getenv("ENVIRONMENT", os.getenv("NODE_ENV", "")) == "production"
        return cls(
            mongodb_uri=os.getenv("MONGODB_URI", ""),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=_env_int("PORT", DEFAULT_PORT),
            log_level=os.getenv("LOG_LEVEL", "WARNING" if production else "INFO").upper(),
            coerce_object_ids=_env_bool("COERCE_OBJECT_IDS", True),
            shutdown_grace_seconds=_env_int(
                "SHUTDOWN_GRACE_SECONDS", DEFAULT_SHUTDOWN_GRACE_SECONDS
            ),
            connection=ConnectionSettings.from_env(),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If a value is out of range
        """
        if not 0 < self.port < 65536:
            raise ConfigurationError(
                f"port must be between 1 and 65535, got {self.port}",
                config_key="port",
                config_value=self.port,
            )
        if self.shutdown_grace_seconds < 0:
            raise ConfigurationError(
                f"shutdown_grace_seconds must be >= 0, got {self.shutdown_grace_seconds}",
                config_key="shutdown_grace_seconds",
                config_value=self.shutdown_grace_seconds,
            )
        self.connection.validate()
