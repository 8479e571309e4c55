"""Prometheus metrics for dispatchers.

Provides:
- Dispatch outcomes by kind (executed, skipped, contended, scheduled, failed)
- Guarded action duration
- Pending debounce re-checks

Usage:
    from debounce_throttle.observability.metrics import get_metrics

    metrics = get_metrics()
    metrics.dispatch_total.labels(kind="throttle", outcome="executed").inc()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram
from prometheus_client import generate_latest as _generate_latest

from debounce_throttle.config import settings

logger = logging.getLogger(__name__)


class Outcome:
    """Label values for dispatch_total."""

    EXECUTED = "executed"
    SKIPPED = "skipped"
    CONTENDED = "contended"
    SCHEDULED = "scheduled"
    FAILED = "failed"


class NoOpMetric:
    """No-op metric for when metrics are disabled."""

    def labels(self, **kwargs: Any) -> NoOpMetric:
        return self

    def inc(self, amount: float = 1) -> None:
        pass

    def dec(self, amount: float = 1) -> None:
        pass

    def set(self, value: float) -> None:
        pass

    def observe(self, value: float) -> None:
        pass


@dataclass
class MetricsRegistry:
    """Registry for dispatcher metrics."""

    enabled: bool = True
    registry: CollectorRegistry = field(default=REGISTRY, repr=False)

    dispatch_total: Any = field(default_factory=NoOpMetric)
    action_duration_seconds: Any = field(default_factory=NoOpMetric)
    pending_rechecks: Any = field(default_factory=NoOpMetric)

    _initialized: bool = field(default=False, repr=False)

    def initialize(self) -> None:
        """Create the Prometheus collectors once."""
        if self._initialized:
            return

        if not self.enabled:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self.dispatch_total = Counter(
            "debounce_throttle_dispatch_total",
            "Dispatch calls by dispatcher kind and outcome",
            ["kind", "outcome"],
            registry=self.registry,
        )

        self.action_duration_seconds = Histogram(
            "debounce_throttle_action_duration_seconds",
            "Duration of guarded actions in seconds",
            ["kind"],
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 10.0),
            registry=self.registry,
        )

        self.pending_rechecks = Gauge(
            "debounce_throttle_pending_rechecks",
            "Scheduled debounce re-checks not yet finished",
            ["kind"],
            registry=self.registry,
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if not self.enabled:
            return b"# Metrics disabled\n"
        return _generate_latest(self.registry)


# Global metrics registry
metrics_registry = MetricsRegistry(enabled=settings.enable_metrics)


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry, initializing it on first access."""
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry
