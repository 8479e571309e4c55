"""Tests for the in-memory timestamp store and timestamp parsing."""

import pytest

from debounce_throttle.store.base import parse_timestamp
from debounce_throttle.store.memory import InMemoryTimestampStore


class TestParseTimestamp:
    """Stored text to integer timestamps."""

    def test_parses_decimal_text(self) -> None:
        assert parse_timestamp("1700000000000000000") == 1_700_000_000_000_000_000

    def test_parses_bytes(self) -> None:
        assert parse_timestamp(b"42") == 42

    def test_zero_is_a_valid_timestamp(self) -> None:
        """Zero must not be confused with absence."""
        assert parse_timestamp("0") == 0

    def test_absent_is_none(self) -> None:
        assert parse_timestamp(None) is None

    @pytest.mark.parametrize("value", ["", "abc", "12.5", b"\xff\xfe"])
    def test_unparsable_is_none(self, value: str | bytes) -> None:
        assert parse_timestamp(value) is None


class TestInMemoryTimestampStore:
    """Dict-backed store."""

    @pytest.fixture
    def store(self) -> InMemoryTimestampStore:
        return InMemoryTimestampStore()

    async def test_get_missing_returns_none(self, store: InMemoryTimestampStore) -> None:
        assert await store.get("missing") is None

    async def test_set_overwrites(self, store: InMemoryTimestampStore) -> None:
        await store.set("k", "1")
        await store.set("k", "2")

        assert await store.get("k") == "2"

    async def test_delete_missing_is_noop(self, store: InMemoryTimestampStore) -> None:
        await store.delete("missing")

        assert store.keys() == []

    async def test_timestamp_helpers(self, store: InMemoryTimestampStore) -> None:
        await store.set_timestamp("k", 123)

        assert await store.get("k") == "123"
        assert await store.get_timestamp("k") == 123
