"""Shared timestamp store interface.

Defines the abstract key-value contract used by dispatchers. Values are
strings; timestamps are integer nanoseconds since the epoch in decimal text.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


def parse_timestamp(value: str | bytes | None) -> int | None:
    """Parse a stored timestamp.

    Returns None when the value is absent or is not a decimal integer, so
    callers can tell "no timestamp" apart from a valid zero.
    """
    if value is None:
        return None
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class TimestampStore(ABC):
    """Abstract base class for shared timestamp stores."""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the string stored under key, or None if absent."""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""
        ...

    async def get_timestamp(self, key: str) -> int | None:
        """Read a timestamp, returning None when absent or unparsable."""
        return parse_timestamp(await self.get(key))

    async def set_timestamp(self, key: str, value: int) -> None:
        """Write a timestamp as decimal text."""
        await self.set(key, str(value))
