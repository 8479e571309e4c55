"""Shared timestamp stores for dispatcher state."""

from debounce_throttle.store.base import TimestampStore, parse_timestamp
from debounce_throttle.store.memory import InMemoryTimestampStore
from debounce_throttle.store.redis import RedisTimestampStore

__all__ = [
    "TimestampStore",
    "parse_timestamp",
    "InMemoryTimestampStore",
    "RedisTimestampStore",
]
