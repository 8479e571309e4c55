"""Distributed locks guarding dispatcher state."""

from debounce_throttle.locks.base import DistributedLock, DistributedLockFactory
from debounce_throttle.locks.memory import InMemoryLock, InMemoryLockFactory
from debounce_throttle.locks.redis import RedisLock, RedisLockFactory

__all__ = [
    "DistributedLock",
    "DistributedLockFactory",
    "InMemoryLock",
    "InMemoryLockFactory",
    "RedisLock",
    "RedisLockFactory",
]
