"""
Unit tests for OperationResult and the health report.
"""

from unittest.mock import MagicMock

from mdb_data_api.handlers.results import OperationResult
from mdb_data_api.observability import build_health_report


class TestOperationResult:
    """Test success/failure result shapes."""

    def test_success(self):
        result = OperationResult.success(deletedCount=3)

        assert result.ok is True
        assert result.to_dict() == {"deletedCount": 3}

    def test_success_with_null_document(self):
        assert OperationResult.success(document=None).to_dict() == {"document": None}

    def test_failure(self):
        result = OperationResult.failure("FIND_ERROR", "Failed to find documents: boom")

        assert result.ok is False
        assert result.to_dict() == {
            "error": "Failed to find documents: boom",
            "error_code": "FIND_ERROR",
        }

    def test_to_dict_returns_copy(self):
        result = OperationResult.success(documents=[])

        result.to_dict()["documents"] = None

        assert result.payload == {"documents": []}


class TestHealthReport:
    """Test the liveness report."""

    def test_connected(self):
        manager = MagicMock()
        manager.is_connected.return_value = True

        report = build_health_report(manager)

        assert report["status"] == "healthy"
        assert report["mongoConnected"] is True
        assert report["timestamp"].endswith("Z")

    def test_no_manager(self):
        assert build_health_report(None)["mongoConnected"] is False
