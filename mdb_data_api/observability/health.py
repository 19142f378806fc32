"""
Health check utilities for MDB_DATA_API.

The liveness report avoids any database round trip: it only reports
whether the ConnectionManager currently holds a client.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..utils.mongo import isoformat_utc

if TYPE_CHECKING:
    from ..core.connection import ConnectionManager


class HealthStatus(str, Enum):
    """Health status enumeration."""

    HEALTHY = "healthy"


def build_health_report(connection_manager: "ConnectionManager | None") -> dict[str, Any]:
    """
    Build the ``/health`` response body.

    Args:
        connection_manager: ConnectionManager instance (None before startup)

    Returns:
        Dictionary with status, timestamp and connection state
    """
    connected = connection_manager is not None and connection_manager.is_connected()
    return {
        "status": HealthStatus.HEALTHY.value,
        "timestamp": isoformat_utc(datetime.now(timezone.utc)),
        "mongoConnected": connected,
    }
