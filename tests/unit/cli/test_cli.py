"""Tests for the demo CLI."""

import io
import re
from unittest.mock import AsyncMock

import pytest
from typer.testing import CliRunner

from debounce_throttle.cli import app
from debounce_throttle.cli.runtime import serve
from debounce_throttle.factory import DebounceThrottle
from debounce_throttle.locks.memory import InMemoryLockFactory
from debounce_throttle.store.memory import InMemoryTimestampStore

runner = CliRunner()

OUTPUT_LINE = re.compile(r"^(?P<text>.*) - \d{2}:\d{2}:\d{2}\.\d{3}$")


def _output_texts(output: str) -> list[str]:
    texts = []
    for line in output.splitlines():
        match = OUTPUT_LINE.match(line)
        if match:
            texts.append(match.group("text"))
    return texts


class TestCli:
    """Commands run in-process with --in-memory."""

    @pytest.fixture(autouse=True)
    def keep_logging(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Leave the root logger alone; the runner closes its streams."""
        monkeypatch.setattr(
            "debounce_throttle.cli.runtime.configure_logging", lambda **kwargs: None
        )

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "throttle" in result.output
        assert "debounce" in result.output

    def test_throttle_prints_first_trigger_only(self) -> None:
        """A fast burst within one interval is printed once."""
        result = runner.invoke(
            app,
            ["throttle", "--in-memory", "--id", "cli-throttle", "--interval-ms", "60000"],
            input="a\nb\nc\n",
        )

        assert result.exit_code == 0, result.output
        assert _output_texts(result.output) == ["a"]

    def test_debounce_prints_buffered_input_once(self) -> None:
        """The burst is flushed once after the input goes quiet."""
        result = runner.invoke(
            app,
            ["debounce", "--in-memory", "--id", "cli-debounce", "--interval-ms", "50"],
            input="a\nb\nc\n",
        )

        assert result.exit_code == 0, result.output
        assert _output_texts(result.output) == ["abc"]

    async def test_serve_closes_factory(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Connections are released once stdin is exhausted."""
        monkeypatch.setattr("sys.stdin", io.StringIO("a\n"))
        factory = DebounceThrottle(InMemoryTimestampStore(), InMemoryLockFactory())
        factory.aclose = AsyncMock()  # type: ignore[method-assign]

        await serve(factory, factory.throttle_dispatcher("cli-serve", 60))

        factory.aclose.assert_awaited_once()

    async def test_serve_closes_factory_on_failure(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("a\n"))
        factory = DebounceThrottle(InMemoryTimestampStore(), InMemoryLockFactory())
        factory.aclose = AsyncMock()  # type: ignore[method-assign]
        dispatcher = factory.throttle_dispatcher("cli-serve", 60)
        dispatcher.dispatch = AsyncMock(  # type: ignore[method-assign]
            side_effect=RuntimeError("boom")
        )

        with pytest.raises(RuntimeError, match="boom"):
            await serve(factory, dispatcher)

        factory.aclose.assert_awaited_once()
