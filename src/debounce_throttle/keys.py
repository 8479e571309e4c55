"""Key schema for dispatcher state in the shared store.

Key format: {prefix}{kind}:{dispatcher_id}:{variant}

Where:
- prefix: configurable namespace, "debounce-throttle:" by default
- kind: "throttle" or "debounce"
- dispatcher_id: caller-chosen identity, must be unique per logical dispatcher
- variant: "time" (last invoke / last attempt), "init" (first trigger), "lock"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from debounce_throttle.config import DEFAULT_KEY_PREFIX

DispatcherKind = Literal["throttle", "debounce"]


@dataclass(frozen=True)
class DispatcherKeys:
    """Key generator for one dispatcher identity."""

    kind: DispatcherKind
    dispatcher_id: str
    prefix: str = DEFAULT_KEY_PREFIX

    def _key(self, variant: str) -> str:
        return f"{self.prefix}{self.kind}:{self.dispatcher_id}:{variant}"

    @property
    def time(self) -> str:
        """Last invoke (throttle) or last attempt (debounce) timestamp."""
        return self._key("time")

    @property
    def init(self) -> str:
        """First trigger of the current debounce window."""
        return self._key("init")

    @property
    def lock(self) -> str:
        """Coordination lock for this dispatcher."""
        return self._key("lock")
