"""Trailing-edge debounce dispatcher with an optional max-delay deadline.

Window lifecycle per dispatcher identity:
- Idle -> open: the first trigger writes the first-trigger timestamp
- every trigger overwrites the last-attempt timestamp and schedules a
  re-check after min(interval, time left before max_delay)
- a re-check runs the action when no trigger arrived for a full interval,
  or when the max-delay deadline of the same window has been reached
- a trigger arriving after the deadline runs the action immediately
- running the action deletes both timestamps, returning to Idle

Re-checks are fire-and-forget asyncio tasks. A later trigger never cancels
an earlier re-check; the earlier one simply finds the window still active
and exits. A re-check that cannot acquire the lock gives up without retry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import ClassVar

from debounce_throttle.config import Settings
from debounce_throttle.dispatchers.base import (
    Action,
    Clock,
    Dispatcher,
    Duration,
    to_nanoseconds,
)
from debounce_throttle.keys import DispatcherKind
from debounce_throttle.locks.base import DistributedLockFactory
from debounce_throttle.observability.metrics import MetricsRegistry, Outcome
from debounce_throttle.store.base import TimestampStore

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException], None]


class DebounceDispatcher(Dispatcher):
    """Runs the action once per burst of triggers, after the burst goes quiet.

    Args:
        max_delay: Upper bound from the first trigger of a burst to the run.
            None means a continuous burst can postpone the run indefinitely.
        on_error: Receives exceptions raised inside background re-checks
            (action failures, store failures). They are always logged too.
    """

    kind: ClassVar[DispatcherKind] = "debounce"

    def __init__(
        self,
        dispatcher_id: str,
        interval: Duration,
        store: TimestampStore,
        lock_factory: DistributedLockFactory,
        settings: Settings | None = None,
        *,
        max_delay: Duration | None = None,
        on_error: ErrorHandler | None = None,
        clock: Clock | None = None,
        metrics: MetricsRegistry | None = None,
    ):
        super().__init__(
            dispatcher_id,
            interval,
            store,
            lock_factory,
            settings,
            clock=clock,
            metrics=metrics,
        )
        self.max_delay_ns = to_nanoseconds(max_delay) if max_delay is not None else None
        if self.max_delay_ns is not None and self.max_delay_ns <= 0:
            raise ValueError("max_delay must be positive")

        self.on_error = on_error
        self._pending: set[asyncio.Task[None]] = set()

    @property
    def pending_count(self) -> int:
        """Number of scheduled re-checks that have not finished."""
        return len(self._pending)

    async def dispatch(self, action: Action) -> bool:
        """Register a trigger for action.

        Returns True only when the max-delay deadline had already passed and
        the action ran within this call. Otherwise a re-check is scheduled
        and False is returned.
        """
        with self._log_context():
            async with self._lock() as held:
                if held is None:
                    logger.debug("Lock held elsewhere, skipping trigger")
                    self._record(Outcome.CONTENDED)
                    return False

                now = self._clock()
                await self.store.set_timestamp(self.keys.time, now)

                first_trigger = await self.store.get_timestamp(self.keys.init)
                if first_trigger is None:
                    first_trigger = now
                    await self.store.set_timestamp(self.keys.init, first_trigger)

                elapsed = now - first_trigger
                if self.max_delay_ns is not None and elapsed > self.max_delay_ns:
                    logger.debug("Max delay exceeded, running immediately")
                    await self._invoke(action)
                    return True

                delay = self.interval_ns
                deadline_window: int | None = None
                if self.max_delay_ns is not None:
                    remaining = self.max_delay_ns - elapsed
                    if remaining <= delay:
                        delay = remaining
                        deadline_window = first_trigger

                self._schedule(action, delay, deadline_window)
                self._record(Outcome.SCHEDULED)
                return False

    async def join(self) -> None:
        """Wait for every scheduled re-check to finish.

        Errors raised by re-checks are not re-raised here; they go through
        on_error and the log.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _schedule(self, action: Action, delay_ns: int, deadline_window: int | None) -> None:
        task = asyncio.create_task(
            self._recheck(action, delay_ns, deadline_window),
            name=f"debounce-recheck:{self.dispatcher_id}",
        )
        self._pending.add(task)
        self._metrics.pending_rechecks.labels(kind=self.kind).inc()
        task.add_done_callback(self._on_recheck_done)
        logger.debug(f"Scheduled re-check in {delay_ns / 1_000_000:.1f}ms")

    def _on_recheck_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        self._metrics.pending_rechecks.labels(kind=self.kind).dec()

        if task.cancelled():
            return

        exc = task.exception()
        if exc is None:
            return

        logger.error(
            f"Background re-check failed for debounce '{self.dispatcher_id}': {exc}",
            exc_info=exc,
        )
        if self.on_error is not None:
            self.on_error(exc)

    async def _recheck(self, action: Action, delay_ns: int, deadline_window: int | None) -> None:
        """Delayed check scheduled by a trigger.

        deadline_window is the first-trigger timestamp of the window when
        this re-check was timed to land on its max-delay deadline.
        """
        await asyncio.sleep(delay_ns / 1_000_000_000)

        async with self._lock() as held:
            if held is None:
                logger.debug("Lock held elsewhere, abandoning re-check")
                self._record(Outcome.CONTENDED)
                return

            now = self._clock()
            last_attempt = await self.store.get_timestamp(self.keys.time)
            if last_attempt is None:
                # Window already closed by another run
                self._record(Outcome.SKIPPED)
                return

            if now - last_attempt >= self.interval_ns:
                logger.debug("Quiet period elapsed, running")
                await self._invoke(action)
                return

            if await self._deadline_reached(now, deadline_window):
                logger.debug("Max delay reached, running")
                await self._invoke(action)
                return

            logger.debug("Superseded by a newer trigger")
            self._record(Outcome.SKIPPED)

    async def _deadline_reached(self, now: int, deadline_window: int | None) -> bool:
        if self.max_delay_ns is None:
            return False

        first_trigger = await self.store.get_timestamp(self.keys.init)
        if first_trigger is None:
            return False

        # The timer may fire a hair early; the window identity is what counts.
        return now - first_trigger >= self.max_delay_ns or first_trigger == deadline_window

    async def _invoke(self, action: Action) -> None:
        """Run the action, then close the window whatever the outcome."""
        try:
            await self._run(action)
        finally:
            await self.store.delete(self.keys.time)
            await self.store.delete(self.keys.init)
