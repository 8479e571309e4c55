"""Tests for the dispatcher factory."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from debounce_throttle.config import Settings
from debounce_throttle.dispatchers.debounce import DebounceDispatcher
from debounce_throttle.dispatchers.throttle import ThrottleDispatcher
from debounce_throttle.factory import DebounceThrottle, create_debounce_throttle
from debounce_throttle.locks.memory import InMemoryLockFactory
from debounce_throttle.locks.redis import RedisLockFactory
from debounce_throttle.observability.metrics import MetricsRegistry
from debounce_throttle.store.memory import InMemoryTimestampStore
from debounce_throttle.store.redis import RedisTimestampStore


class TestDebounceThrottle:
    """Factory wiring."""

    @pytest.fixture
    def factory(
        self,
        store: InMemoryTimestampStore,
        lock_factory: InMemoryLockFactory,
        settings: Settings,
        metrics: MetricsRegistry,
    ) -> DebounceThrottle:
        return DebounceThrottle(store, lock_factory, settings, metrics=metrics)

    def test_throttle_dispatcher(self, factory: DebounceThrottle, settings: Settings) -> None:
        throttle = factory.throttle_dispatcher("notify", timedelta(milliseconds=500))

        assert isinstance(throttle, ThrottleDispatcher)
        assert throttle.interval_ns == 500_000_000
        assert throttle.keys.time == "test:throttle:notify:time"
        assert throttle.settings is settings

    def test_debounce_dispatcher(self, factory: DebounceThrottle) -> None:
        debounce = factory.debounce_dispatcher("reindex", 0.5, max_delay=1.5)

        assert isinstance(debounce, DebounceDispatcher)
        assert debounce.interval_ns == 500_000_000
        assert debounce.max_delay_ns == 1_500_000_000
        assert debounce.keys.init == "test:debounce:reindex:init"

    def test_debounce_without_max_delay(self, factory: DebounceThrottle) -> None:
        assert factory.debounce_dispatcher("reindex", 0.5).max_delay_ns is None

    def test_on_error_is_passed_through(
        self,
        store: InMemoryTimestampStore,
        lock_factory: InMemoryLockFactory,
        metrics: MetricsRegistry,
    ) -> None:
        errors: list[BaseException] = []
        factory = DebounceThrottle(store, lock_factory, on_error=errors.append, metrics=metrics)

        assert factory.debounce_dispatcher("reindex", 0.5).on_error == errors.append

    async def test_dispatchers_share_state(
        self, factory: DebounceThrottle, store: InMemoryTimestampStore
    ) -> None:
        """Two dispatchers with the same id see the same window."""
        calls: list[int] = []
        first = factory.throttle_dispatcher("notify", 60)
        second = factory.throttle_dispatcher("notify", 60)

        await first.dispatch(lambda: calls.append(1))
        await second.dispatch(lambda: calls.append(2))

        assert calls == [1]

    def test_invalid_interval(self, factory: DebounceThrottle) -> None:
        with pytest.raises(ValueError):
            factory.throttle_dispatcher("notify", timedelta(0))


class TestCreateDebounceThrottle:
    """Redis-backed construction."""

    def test_with_client(self) -> None:
        client = AsyncMock()
        settings = Settings(lock_retry_count=2, lock_retry_delay=timedelta(milliseconds=50))

        factory = create_debounce_throttle(settings=settings, client=client)

        assert isinstance(factory.store, RedisTimestampStore)
        assert factory.store.client is client
        assert isinstance(factory.lock_factory, RedisLockFactory)
        assert factory.lock_factory.retry_count == 2
        assert factory.lock_factory.retry_delay == timedelta(milliseconds=50)
        assert factory.settings is settings

    def test_with_url(self) -> None:
        """Connecting is lazy, so building from a URL needs no server."""
        factory = create_debounce_throttle("redis://localhost:6379/15")

        assert isinstance(factory.store, RedisTimestampStore)
        assert isinstance(factory.lock_factory, RedisLockFactory)
        assert factory.lock_factory.client is factory.store.client

    async def test_aclose_closes_owned_client(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A client created from a URL is closed with the factory."""
        client = AsyncMock()
        monkeypatch.setattr("debounce_throttle.factory.redis.from_url", lambda *a, **kw: client)

        factory = create_debounce_throttle("redis://localhost:6379/15")
        await factory.aclose()
        await factory.aclose()

        client.aclose.assert_awaited_once()

    async def test_aclose_leaves_caller_client_open(self) -> None:
        client = AsyncMock()

        factory = create_debounce_throttle(client=client)
        await factory.aclose()

        client.aclose.assert_not_awaited()
