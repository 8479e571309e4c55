"""In-process lock factory.

Mutual exclusion only holds between tasks of one process. Expiry is
honoured, so a holder that never releases loses the lock after its TTL.
"""

from __future__ import annotations

import time
from datetime import timedelta
from uuid import uuid4

from debounce_throttle.locks.base import DistributedLock, DistributedLockFactory


class InMemoryLock(DistributedLock):
    def __init__(self, factory: InMemoryLockFactory, key: str, token: str, expiry: timedelta):
        super().__init__(key, token, expiry)
        self._factory = factory

    async def release(self) -> None:
        self._factory._release(self.key, self.token)


class InMemoryLockFactory(DistributedLockFactory):
    """Lock table keyed by lock key, holding (token, deadline) pairs."""

    def __init__(self) -> None:
        self._held: dict[str, tuple[str, float]] = {}

    async def acquire(self, key: str, expiry: timedelta) -> DistributedLock | None:
        now = time.monotonic()
        current = self._held.get(key)
        if current is not None and current[1] > now:
            return None

        token = uuid4().hex
        self._held[key] = (token, now + expiry.total_seconds())
        return InMemoryLock(self, key, token, expiry)

    def _release(self, key: str, token: str) -> None:
        current = self._held.get(key)
        if current is not None and current[0] == token:
            del self._held[key]

    def is_locked(self, key: str) -> bool:
        """Check whether key is currently held by an unexpired token."""
        current = self._held.get(key)
        return current is not None and current[1] > time.monotonic()
