"""Distributed debounce and throttle dispatchers.

Coordinates a guarded action across processes that share a Redis instance
(or any TimestampStore / DistributedLockFactory pair):
- Throttle: run immediately, then drop triggers until the interval elapses
- Debounce: run once a burst of triggers has been quiet for the interval,
  or when the optional max delay since the burst started is reached

Example:
    from datetime import timedelta

    from debounce_throttle import create_debounce_throttle

    debounce_throttle = create_debounce_throttle()
    throttle = debounce_throttle.throttle_dispatcher("notify", timedelta(seconds=1))
    await throttle.dispatch(send_notification)
"""

from debounce_throttle.config import Settings, settings
from debounce_throttle.dispatchers import (
    DebounceDispatcher,
    Dispatcher,
    ThrottleDispatcher,
)
from debounce_throttle.errors import (
    DebounceThrottleError,
    LockBackendError,
    StoreBackendError,
)
from debounce_throttle.factory import DebounceThrottle, create_debounce_throttle
from debounce_throttle.keys import DispatcherKeys
from debounce_throttle.locks import (
    DistributedLock,
    DistributedLockFactory,
    InMemoryLockFactory,
    RedisLockFactory,
)
from debounce_throttle.store import (
    InMemoryTimestampStore,
    RedisTimestampStore,
    TimestampStore,
)

__all__ = [
    # Factory
    "DebounceThrottle",
    "create_debounce_throttle",
    # Dispatchers
    "Dispatcher",
    "ThrottleDispatcher",
    "DebounceDispatcher",
    # Collaborators
    "TimestampStore",
    "InMemoryTimestampStore",
    "RedisTimestampStore",
    "DistributedLock",
    "DistributedLockFactory",
    "InMemoryLockFactory",
    "RedisLockFactory",
    # Config and keys
    "Settings",
    "settings",
    "DispatcherKeys",
    # Errors
    "DebounceThrottleError",
    "StoreBackendError",
    "LockBackendError",
]
