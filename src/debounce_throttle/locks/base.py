"""Distributed lock interface.

A lock grants exclusive, time-bounded ownership of a key. Acquisition may
fail under contention instead of blocking; that is a normal outcome, not an
error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta


class DistributedLock(ABC):
    """An acquired lock token."""

    def __init__(self, key: str, token: str, expiry: timedelta):
        self.key = key
        self.token = token
        self.expiry = expiry

    @abstractmethod
    async def release(self) -> None:
        """Release the lock if this token still owns it."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, expiry={self.expiry!r})"


class DistributedLockFactory(ABC):
    """Abstract base class for lock backends."""

    @abstractmethod
    async def acquire(self, key: str, expiry: timedelta) -> DistributedLock | None:
        """Try to acquire the lock for key.

        Returns the lock on success or None when another holder owns it.
        Ownership is reclaimed automatically after expiry if never released.
        """
        ...

    @asynccontextmanager
    async def lock(self, key: str, expiry: timedelta) -> AsyncIterator[DistributedLock | None]:
        """Scoped acquisition with guaranteed release.

        Yields the lock, or None if it was not acquired. Release happens on
        every exit path, including exceptions raised inside the block.

        Example:
            async with factory.lock("jobs:cleanup", timedelta(seconds=10)) as held:
                if held is None:
                    return
                await do_work()
        """
        held = await self.acquire(key, expiry)
        try:
            yield held
        finally:
            if held is not None:
                await held.release()
