"""In-memory timestamp store.

Only shares state between dispatchers living in the same process. Useful
for tests and single-instance deployments.
"""

from __future__ import annotations

from debounce_throttle.store.base import TimestampStore


class InMemoryTimestampStore(TimestampStore):
    """Dict-backed store."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        """Keys currently stored, for inspection."""
        return list(self._data)
