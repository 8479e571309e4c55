"""Redis lock factory.

Single-instance Redis lock using the lease approach:
1. Acquire with SET NX PX and a random token
2. The lock expires on its own after the lease if the holder dies
3. Release deletes the key only if the token still matches (Lua script)

Acquisition is attempted once by default. ``retry_count`` adds bounded
retries spaced by ``retry_delay``; it never blocks indefinitely.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from datetime import timedelta
from typing import TYPE_CHECKING, cast
from uuid import uuid4

from redis.exceptions import RedisError

from debounce_throttle.errors import LockBackendError
from debounce_throttle.locks.base import DistributedLock, DistributedLockFactory

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# Only delete if we own it
RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


def _expiry_ms(expiry: timedelta) -> int:
    return max(1, int(expiry.total_seconds() * 1000))


class RedisLock(DistributedLock):
    """A lock held in Redis under its key."""

    def __init__(self, client: Redis, key: str, token: str, expiry: timedelta):
        super().__init__(key, token, expiry)
        self._client = client
        self._released = False

    async def release(self) -> None:
        """Release the lock.

        A failure to release is logged rather than raised: the lease expires
        on its own and raising here would mask the caller's own outcome.
        """
        if self._released:
            return
        self._released = True
        try:
            result = await cast(
                Awaitable[int],
                self._client.eval(RELEASE_SCRIPT, 1, self.key, self.token),
            )
        except RedisError as e:
            logger.warning(f"Failed to release lock '{self.key}', it will expire: {e}")
            return

        if not result:
            logger.warning(f"Lock '{self.key}' expired before release")


class RedisLockFactory(DistributedLockFactory):
    """Creates Redis locks.

    Args:
        client: redis.asyncio client
        retry_count: Extra acquisition attempts after the first (default 0)
        retry_delay: Pause between attempts
        raise_on_backend_error: Raise LockBackendError on Redis failures
            instead of treating them as "not acquired"
    """

    def __init__(
        self,
        client: Redis,
        retry_count: int = 0,
        retry_delay: timedelta = timedelta(milliseconds=200),
        raise_on_backend_error: bool = False,
    ):
        if retry_count < 0:
            raise ValueError("retry_count must be >= 0")
        self.client = client
        self.retry_count = retry_count
        self.retry_delay = retry_delay
        self.raise_on_backend_error = raise_on_backend_error

    async def acquire(self, key: str, expiry: timedelta) -> DistributedLock | None:
        token = uuid4().hex
        px = _expiry_ms(expiry)

        for attempt in range(self.retry_count + 1):
            if attempt:
                await asyncio.sleep(self.retry_delay.total_seconds())

            try:
                acquired = await self.client.set(key, token, nx=True, px=px)
            except RedisError as e:
                if self.raise_on_backend_error:
                    raise LockBackendError("acquire", key, str(e)) from e
                logger.warning(f"Lock backend error acquiring '{key}': {e}")
                continue

            if acquired:
                logger.debug(f"Acquired lock '{key}' for {px}ms")
                return RedisLock(self.client, key, token, expiry)

        logger.debug(f"Lock '{key}' not acquired after {self.retry_count + 1} attempt(s)")
        return None
