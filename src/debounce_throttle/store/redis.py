"""Redis-backed timestamp store.

Uses the redis-py async client. The caller owns the client and its
connection pool.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from redis.exceptions import RedisError

from debounce_throttle.errors import StoreBackendError
from debounce_throttle.store.base import TimestampStore

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class RedisTimestampStore(TimestampStore):
    """Timestamp store on plain Redis string keys.

    Keys never expire; debounce keys are deleted when the action runs and
    throttle keys are simply overwritten. Backend failures are raised as
    StoreBackendError and are not retried.
    """

    def __init__(self, client: Redis):
        self.client = client

    async def get(self, key: str) -> str | None:
        try:
            value = await self.client.get(key)
        except RedisError as e:
            logger.warning(f"Redis GET failed for '{key}': {e}")
            raise StoreBackendError("get", key, str(e)) from e

        if value is None:
            return None
        return value.decode(errors="replace") if isinstance(value, bytes) else str(value)

    async def set(self, key: str, value: str) -> None:
        try:
            await self.client.set(key, value)
        except RedisError as e:
            logger.warning(f"Redis SET failed for '{key}': {e}")
            raise StoreBackendError("set", key, str(e)) from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            logger.warning(f"Redis DEL failed for '{key}': {e}")
            raise StoreBackendError("delete", key, str(e)) from e
