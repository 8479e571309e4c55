"""Leading-edge throttle dispatcher.

The first dispatch after the interval has elapsed runs immediately; every
other dispatch within the interval is dropped. The decision and the
timestamp update happen under the dispatcher's distributed lock, so across
all processes at most one run happens per interval.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from debounce_throttle.dispatchers.base import Action, Dispatcher
from debounce_throttle.keys import DispatcherKind
from debounce_throttle.observability.metrics import Outcome

logger = logging.getLogger(__name__)


class ThrottleDispatcher(Dispatcher):
    """Runs the action at most once per interval across all instances."""

    kind: ClassVar[DispatcherKind] = "throttle"

    async def dispatch(self, action: Action) -> bool:
        """Run action now unless it already ran within the interval.

        Returns False without running when the lock is held elsewhere or the
        interval has not elapsed. The timestamp is written before the action
        runs, so a failing action still consumes its window.
        """
        with self._log_context():
            async with self._lock() as held:
                if held is None:
                    logger.debug("Lock held elsewhere, skipping")
                    self._record(Outcome.CONTENDED)
                    return False

                now = self._clock()
                last_invoke = await self.store.get_timestamp(self.keys.time)
                if last_invoke is not None and now - last_invoke < self.interval_ns:
                    logger.debug("Interval not elapsed, skipping")
                    self._record(Outcome.SKIPPED)
                    return False

                await self.store.set_timestamp(self.keys.time, now)
                await self._run(action)
                return True
