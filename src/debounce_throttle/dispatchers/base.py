"""Dispatcher contract and shared plumbing.

A dispatcher accepts a no-argument action and decides, in coordination with
every other process sharing the same store and lock backend, whether to run
it now, later, or not at all.
"""

from __future__ import annotations

import inspect
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from datetime import timedelta
from typing import Any, ClassVar

from debounce_throttle.config import Settings
from debounce_throttle.config import settings as default_settings
from debounce_throttle.keys import DispatcherKeys, DispatcherKind
from debounce_throttle.locks.base import DistributedLock, DistributedLockFactory
from debounce_throttle.observability.logging import LogContext
from debounce_throttle.observability.metrics import MetricsRegistry, Outcome, get_metrics
from debounce_throttle.store.base import TimestampStore

logger = logging.getLogger(__name__)

Action = Callable[[], Awaitable[Any] | Any]
Clock = Callable[[], int]
Duration = timedelta | float


def to_nanoseconds(value: Duration) -> int:
    """Convert a timedelta or a number of seconds to integer nanoseconds."""
    if isinstance(value, timedelta):
        return (value // timedelta(microseconds=1)) * 1000
    return int(value * 1_000_000_000)


async def run_action(action: Action) -> None:
    """Call action, awaiting the result when it is awaitable."""
    result = action()
    if inspect.isawaitable(result):
        await result


class Dispatcher(ABC):
    """Base class for throttle and debounce dispatchers.

    Args:
        dispatcher_id: Identity shared by every instance that must coordinate
        interval: Throttle window or debounce quiet period
        store: Shared timestamp store
        lock_factory: Distributed lock backend
        settings: Key prefix and lock expiry (module settings if None)
        clock: Wall clock in nanoseconds since the epoch
        metrics: Metrics registry (global registry if None)
    """

    kind: ClassVar[DispatcherKind]

    def __init__(
        self,
        dispatcher_id: str,
        interval: Duration,
        store: TimestampStore,
        lock_factory: DistributedLockFactory,
        settings: Settings | None = None,
        *,
        clock: Clock | None = None,
        metrics: MetricsRegistry | None = None,
    ):
        if not dispatcher_id:
            raise ValueError("dispatcher_id must not be empty")

        self.dispatcher_id = dispatcher_id
        self.interval_ns = to_nanoseconds(interval)
        if self.interval_ns <= 0:
            raise ValueError("interval must be positive")

        self.store = store
        self.lock_factory = lock_factory
        self.settings = settings or default_settings
        self.keys = DispatcherKeys(self.kind, dispatcher_id, self.settings.key_prefix)
        self._clock = clock or time.time_ns
        self._metrics = metrics or get_metrics()

    @abstractmethod
    async def dispatch(self, action: Action) -> bool:
        """Submit action for coordinated execution.

        Returns True if the action ran during this call. Exceptions raised by
        the action, and store backend failures, propagate to the caller.
        """
        ...

    def _log_context(self) -> LogContext:
        return LogContext(dispatcher_id=self.dispatcher_id, dispatcher_kind=self.kind)

    def _lock(self) -> AbstractAsyncContextManager[DistributedLock | None]:
        return self.lock_factory.lock(self.keys.lock, self.settings.lock_expiry)

    def _record(self, outcome: str) -> None:
        self._metrics.dispatch_total.labels(kind=self.kind, outcome=outcome).inc()

    async def _run(self, action: Action) -> None:
        """Run the action, recording its outcome and duration."""
        start = time.perf_counter()
        try:
            await run_action(action)
        except Exception:
            self._record(Outcome.FAILED)
            raise
        else:
            self._record(Outcome.EXECUTED)
        finally:
            self._metrics.action_duration_seconds.labels(kind=self.kind).observe(
                time.perf_counter() - start
            )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dispatcher_id={self.dispatcher_id!r})"
