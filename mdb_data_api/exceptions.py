"""
Custom exceptions for MDB_DATA_API.

These exceptions provide more specific error types while maintaining
backward compatibility with RuntimeError.
"""

from typing import Any


class DataApiError(RuntimeError):
    """
    Base exception for Data API errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (database,
                 collection, action, etc.)
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            context: Optional dictionary with additional context information
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class ConfigurationError(DataApiError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        config_value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class DatabaseConnectionError(DataApiError):
    """
    Raised when the MongoDB cluster cannot be reached.

    The underlying driver error is chained as ``__cause__``. Connection
    failures are not retried internally; the next request tries again.

    Attributes:
        message: Error message
        error_type: Name of the underlying driver exception (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        error_type: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        context = context or {}
        if error_type:
            context["error_type"] = error_type
        super().__init__(message, context=context)
        self.error_type = error_type


class NotConnectedError(DataApiError):
    """Raised when a database handle is requested before ``connect`` succeeded."""

    def __init__(self, message: str = "Database client not connected") -> None:
        super().__init__(message)
