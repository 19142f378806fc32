"""
Observability components.

Provides request-scoped logging, operation metrics and the liveness report.
"""

from .health import HealthStatus, build_health_report
from .logging import (
    ContextualLoggerAdapter,
    RequestContext,
    begin_request,
    bind_action,
    configure_logging,
    current_request,
    end_request,
    get_logger,
    log_action,
)
from .metrics import (
    MetricsCollector,
    OperationStats,
    get_metrics_collector,
    record_operation,
)

__all__ = [
    # Metrics
    "MetricsCollector",
    "OperationStats",
    "get_metrics_collector",
    "record_operation",
    # Logging
    "configure_logging",
    "RequestContext",
    "begin_request",
    "bind_action",
    "end_request",
    "current_request",
    "ContextualLoggerAdapter",
    "get_logger",
    "log_action",
    # Health
    "HealthStatus",
    "build_health_report",
]
