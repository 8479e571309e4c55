"""Exception hierarchy for debounce/throttle dispatching.

Lock contention is deliberately absent: failing to acquire a lock is a
normal outcome and never raised.
"""

from __future__ import annotations


class DebounceThrottleError(Exception):
    """Base class for errors raised by this package."""


class StoreBackendError(DebounceThrottleError):
    """The shared timestamp store failed a get, set or delete."""

    def __init__(self, operation: str, key: str, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        text = f"Timestamp store {operation} failed for key '{key}'"
        if reason:
            text = f"{text}: {reason}"
        super().__init__(text)


class LockBackendError(DebounceThrottleError):
    """The distributed lock backend failed while acquiring or releasing."""

    def __init__(self, operation: str, key: str, reason: str = ""):
        self.operation = operation
        self.key = key
        self.reason = reason
        text = f"Lock {operation} failed for key '{key}'"
        if reason:
            text = f"{text}: {reason}"
        super().__init__(text)
