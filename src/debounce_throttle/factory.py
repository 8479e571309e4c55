"""Dispatcher factory.

Binds a timestamp store, a lock factory and one set of settings, and hands
out named throttle and debounce dispatchers that share them.

Example:
    from debounce_throttle import create_debounce_throttle

    debounce_throttle = create_debounce_throttle("redis://localhost:6379/0")
    reindex = debounce_throttle.debounce_dispatcher(
        "reindex", timedelta(milliseconds=500), max_delay=timedelta(seconds=2)
    )

    await reindex.dispatch(rebuild_index)
    await debounce_throttle.aclose()
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import redis.asyncio as redis

from debounce_throttle.config import Settings
from debounce_throttle.config import settings as default_settings
from debounce_throttle.dispatchers.base import Clock, Dispatcher, Duration
from debounce_throttle.dispatchers.debounce import DebounceDispatcher, ErrorHandler
from debounce_throttle.dispatchers.throttle import ThrottleDispatcher
from debounce_throttle.locks.base import DistributedLockFactory
from debounce_throttle.locks.redis import RedisLockFactory
from debounce_throttle.observability.metrics import MetricsRegistry
from debounce_throttle.store.base import TimestampStore
from debounce_throttle.store.redis import RedisTimestampStore

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class DebounceThrottle:
    """Creates dispatchers sharing a store, a lock factory and settings.

    Args:
        store: Shared timestamp store
        lock_factory: Distributed lock backend
        settings: Settings applied to every dispatcher (module settings if None)
        on_error: Handler for errors raised in debounce background re-checks
        clock: Wall clock in nanoseconds, mainly for tests
        metrics: Metrics registry (global registry if None)
    """

    def __init__(
        self,
        store: TimestampStore,
        lock_factory: DistributedLockFactory,
        settings: Settings | None = None,
        *,
        on_error: ErrorHandler | None = None,
        clock: Clock | None = None,
        metrics: MetricsRegistry | None = None,
    ):
        self.store = store
        self.lock_factory = lock_factory
        self.settings = settings or default_settings
        self.on_error = on_error
        self._clock = clock
        self._metrics = metrics
        self._owned_client: Redis | None = None

    def throttle_dispatcher(self, dispatcher_id: str, interval: Duration) -> Dispatcher:
        """Create a throttle dispatcher.

        Args:
            dispatcher_id: Unique identity; equal ids share one throttle window
            interval: Minimum time between runs (timedelta or seconds)
        """
        return ThrottleDispatcher(
            dispatcher_id,
            interval,
            self.store,
            self.lock_factory,
            self.settings,
            clock=self._clock,
            metrics=self._metrics,
        )

    def debounce_dispatcher(
        self,
        dispatcher_id: str,
        interval: Duration,
        max_delay: Duration | None = None,
    ) -> DebounceDispatcher:
        """Create a debounce dispatcher.

        Args:
            dispatcher_id: Unique identity; equal ids share one debounce window
            interval: Quiet period required before running
            max_delay: Optional bound from the first trigger of a burst to the run
        """
        return DebounceDispatcher(
            dispatcher_id,
            interval,
            self.store,
            self.lock_factory,
            self.settings,
            max_delay=max_delay,
            on_error=self.on_error,
            clock=self._clock,
            metrics=self._metrics,
        )

    async def aclose(self) -> None:
        """Close the Redis client created for this factory, if any.

        Clients passed in by the caller are left open.
        """
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None


def create_debounce_throttle(
    redis_url: str | None = None,
    settings: Settings | None = None,
    *,
    client: Redis | None = None,
    on_error: ErrorHandler | None = None,
) -> DebounceThrottle:
    """Build a Redis-backed factory.

    Uses the given client, or creates one for redis_url (falling back to
    settings.redis_url). Store and locks share the same connection pool. A
    client created here is owned by the factory and closed by
    DebounceThrottle.aclose().
    """
    settings = settings or default_settings
    owned = client is None
    if client is None:
        client = redis.from_url(  # type: ignore[no-untyped-call]
            redis_url or settings.redis_url,
            encoding="utf-8",
            decode_responses=False,
        )
        logger.debug("Created Redis client for dispatcher factory")

    lock_factory = RedisLockFactory(
        client,
        retry_count=settings.lock_retry_count,
        retry_delay=settings.lock_retry_delay,
    )
    factory = DebounceThrottle(
        RedisTimestampStore(client),
        lock_factory,
        settings,
        on_error=on_error,
    )
    if owned:
        factory._owned_client = client
    return factory
