"""Global pytest configuration and fixtures."""

from __future__ import annotations

from datetime import timedelta

import pytest
from prometheus_client import CollectorRegistry

from debounce_throttle.config import Settings
from debounce_throttle.locks.base import DistributedLock, DistributedLockFactory
from debounce_throttle.locks.memory import InMemoryLockFactory
from debounce_throttle.observability.metrics import MetricsRegistry
from debounce_throttle.store.memory import InMemoryTimestampStore


class FakeClock:
    """Manually advanced wall clock in nanoseconds."""

    def __init__(self, start: int = 1_700_000_000_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, *, ms: float = 0, seconds: float = 0) -> None:
        self.now += int(ms * 1_000_000) + int(seconds * 1_000_000_000)


class DenyingLockFactory(DistributedLockFactory):
    """Grants the first `grants` acquisitions, then reports contention."""

    def __init__(self, grants: int = 0) -> None:
        self._inner = InMemoryLockFactory()
        self.grants = grants
        self.attempts = 0

    async def acquire(self, key: str, expiry: timedelta) -> DistributedLock | None:
        self.attempts += 1
        if self.grants <= 0:
            return None
        self.grants -= 1
        return await self._inner.acquire(key, expiry)


@pytest.fixture
def settings() -> Settings:
    return Settings(key_prefix="test:", lock_expiry=timedelta(seconds=5))


@pytest.fixture
def store() -> InMemoryTimestampStore:
    return InMemoryTimestampStore()


@pytest.fixture
def lock_factory() -> InMemoryLockFactory:
    return InMemoryLockFactory()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics() -> MetricsRegistry:
    """Metrics bound to a private registry so tests don't share counters."""
    registry = MetricsRegistry(registry=CollectorRegistry())
    registry.initialize()
    return registry


@pytest.fixture
def denying_lock_factory() -> type[DenyingLockFactory]:
    """Lock factory class that stops granting after a number of acquisitions."""
    return DenyingLockFactory
