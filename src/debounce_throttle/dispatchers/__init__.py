"""Throttle and debounce dispatchers."""

from debounce_throttle.dispatchers.base import (
    Action,
    Dispatcher,
    run_action,
    to_nanoseconds,
)
from debounce_throttle.dispatchers.debounce import DebounceDispatcher
from debounce_throttle.dispatchers.throttle import ThrottleDispatcher

__all__ = [
    "Action",
    "Dispatcher",
    "DebounceDispatcher",
    "ThrottleDispatcher",
    "run_action",
    "to_nanoseconds",
]
