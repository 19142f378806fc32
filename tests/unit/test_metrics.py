"""
Unit tests for MetricsCollector.

Tests metrics collection functionality including:
- Thread-safety under concurrent access
- The GET /metrics summary shape
"""

import threading

from mdb_data_api.observability.metrics import (
    MetricsCollector,
    OperationStats,
    get_metrics_collector,
    record_operation,
)


class TestOperationStats:
    """Test the per-operation accumulator."""

    def test_record_tracks_average_max_and_errors(self):
        stats = OperationStats()

        stats.record(10.0, success=True)
        stats.record(30.0, success=False)

        data = stats.to_dict()
        assert data["count"] == 2
        assert data["error_count"] == 1
        assert data["avg_duration_ms"] == 20.0
        assert data["max_duration_ms"] == 30.0
        assert data["last_error_at"].endswith("Z")

    def test_empty_stats_to_dict(self):
        data = OperationStats().to_dict()

        assert data == {
            "count": 0,
            "error_count": 0,
            "avg_duration_ms": 0.0,
            "max_duration_ms": 0.0,
            "last_error_at": None,
        }


class TestMetricsCollectorThreadSafety:
    """Test thread-safety of metrics collection."""

    def test_concurrent_record_operation(self):
        """Test that concurrent record_operation calls are thread-safe."""
        collector = MetricsCollector()
        num_threads = 10
        operations_per_thread = 100
        barrier = threading.Barrier(num_threads)

        def record_operations():
            barrier.wait()
            for i in range(operations_per_thread):
                collector.record_operation("action.find", duration_ms=10.0 + i)

        threads = [threading.Thread(target=record_operations) for _ in range(num_threads)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert collector.get_operation_count("action.find") == num_threads * operations_per_thread


class TestMetricsCollectorSummary:
    """Test the summary served by GET /metrics."""

    def test_summary_groups_by_operation(self):
        collector = MetricsCollector()
        collector.record_operation("connection.connect", 40.0)
        collector.record_operation("action.find", 10.0)
        collector.record_operation("action.find", 20.0, success=False)

        summary = collector.get_summary()

        assert summary["since"].endswith("Z")
        assert list(summary["operations"]) == ["action.find", "connection.connect"]
        assert summary["operations"]["action.find"]["count"] == 2
        assert summary["operations"]["action.find"]["error_count"] == 1
        assert summary["operations"]["action.find"]["avg_duration_ms"] == 15.0
        assert summary["operations"]["connection.connect"]["last_error_at"] is None

    def test_unknown_operation_count_is_zero(self):
        assert MetricsCollector().get_operation_count("action.aggregate") == 0

    def test_reset(self):
        collector = MetricsCollector()
        collector.record_operation("action.find", 1.0)

        collector.reset()

        assert collector.get_summary()["operations"] == {}
        assert collector.get_operation_count("action.find") == 0


class TestGlobalCollector:
    """Test the module-level collector helpers."""

    def test_global_collector_is_singleton(self):
        assert get_metrics_collector() is get_metrics_collector()

    def test_record_operation_uses_global_collector(self):
        record_operation("action.deleteOne", 3.0)

        assert get_metrics_collector().get_operation_count("action.deleteOne") == 1
