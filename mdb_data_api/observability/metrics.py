"""
In-process operation metrics for MDB_DATA_API.

The service only ever records a small fixed set of operations: one per Data
API action (``action.findOne``, ...) plus the connection lifecycle
(``connection.connect``, ``connection.close``). The collector keeps one
running aggregate per operation and serves a snapshot for ``GET /metrics``.
"""

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..utils.mongo import isoformat_utc


@dataclass
class OperationStats:
    """Running totals for one operation."""

    count: int = 0
    error_count: int = 0
    total_duration_ms: float = 0.0
    max_duration_ms: float = 0.0
    last_error_at: datetime | None = None

    def record(self, duration_ms: float, success: bool) -> None:
        self.count += 1
        self.total_duration_ms += duration_ms
        self.max_duration_ms = max(self.max_duration_ms, duration_ms)
        if not success:
            self.error_count += 1
            self.last_error_at = datetime.now(timezone.utc)

    def to_dict(self) -> dict[str, Any]:
        avg = self.total_duration_ms / self.count if self.count else 0.0
        return {
            "count": self.count,
            "error_count": self.error_count,
            "avg_duration_ms": round(avg, 2),
            "max_duration_ms": round(self.max_duration_ms, 2),
            "last_error_at": isoformat_utc(self.last_error_at) if self.last_error_at else None,
        }


class MetricsCollector:
    """
    Thread-safe per-operation statistics.

    Example:
        collector = MetricsCollector()
        collector.record_operation("action.find", 12.5)
        collector.get_summary()["operations"]["action.find"]["count"]  # 1
    """

    def __init__(self) -> None:
        self._stats: dict[str, OperationStats] = {}
        self._lock = threading.Lock()
        self._since = datetime.now(timezone.utc)

    def record_operation(
        self, operation_name: str, duration_ms: float, success: bool = True
    ) -> None:
        """
        Record one execution of an operation.

        Args:
            operation_name: e.g. ``action.insertOne`` or ``connection.connect``
            duration_ms: Duration in milliseconds
            success: Whether the operation succeeded
        """
        with self._lock:
            stats = self._stats.setdefault(operation_name, OperationStats())
            stats.record(duration_ms, success)

    def get_operation_count(self, operation_name: str) -> int:
        with self._lock:
            stats = self._stats.get(operation_name)
            return stats.count if stats else 0

    def get_summary(self) -> dict[str, Any]:
        """Snapshot served by ``GET /metrics``."""
        with self._lock:
            operations = {name: stats.to_dict() for name, stats in sorted(self._stats.items())}
            since = self._since

        return {"since": isoformat_utc(since), "operations": operations}

    def reset(self) -> None:
        """Drop all statistics and restart the collection window."""
        with self._lock:
            self._stats.clear()
            self._since = datetime.now(timezone.utc)


# Global metrics collector instance
_metrics_collector: MetricsCollector | None = None


def get_metrics_collector() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics_collector
    if _metrics_collector is None:
        _metrics_collector = MetricsCollector()
    return _metrics_collector


def record_operation(operation_name: str, duration_ms: float, success: bool = True) -> None:
    """Record an operation in the global metrics collector."""
    get_metrics_collector().record_operation(operation_name, duration_ms, success)
