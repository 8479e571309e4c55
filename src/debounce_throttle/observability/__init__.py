"""Observability for dispatchers.

Provides structured logging and Prometheus metrics:
- JSON/console logging with dispatcher context
- Dispatch outcome counters, action latency, pending re-checks
"""

from debounce_throttle.observability.logging import (
    LogContext,
    configure_logging,
    dispatcher_id_var,
    dispatcher_kind_var,
)
from debounce_throttle.observability.metrics import (
    MetricsRegistry,
    NoOpMetric,
    Outcome,
    get_metrics,
    metrics_registry,
)

__all__ = [
    # Logging
    "configure_logging",
    "LogContext",
    "dispatcher_id_var",
    "dispatcher_kind_var",
    # Metrics
    "MetricsRegistry",
    "NoOpMetric",
    "Outcome",
    "get_metrics",
    "metrics_registry",
]
