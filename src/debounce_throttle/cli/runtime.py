"""Shared plumbing for the demo commands.

Each stdin line is a trigger. Lines accumulate in a buffer; when the
dispatcher lets the action run, the buffer is printed with a timestamp and
cleared.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from datetime import datetime, timezone
from typing import TextIO

import typer

from debounce_throttle.config import settings
from debounce_throttle.dispatchers.base import Dispatcher
from debounce_throttle.dispatchers.debounce import DebounceDispatcher
from debounce_throttle.factory import DebounceThrottle, create_debounce_throttle
from debounce_throttle.locks.memory import InMemoryLockFactory
from debounce_throttle.observability.logging import configure_logging
from debounce_throttle.store.memory import InMemoryTimestampStore


def build_factory(redis_url: str | None, in_memory: bool) -> DebounceThrottle:
    """Create the dispatcher factory for a demo run."""
    configure_logging(json_format=settings.log_json, level=settings.log_level)

    def report(exc: BaseException) -> None:
        typer.echo(f"action failed: {exc}", err=True)

    if in_memory:
        return DebounceThrottle(
            InMemoryTimestampStore(), InMemoryLockFactory(), on_error=report
        )
    return create_debounce_throttle(redis_url, on_error=report)


class LineBuffer:
    """Accumulates triggers and flushes them as one line of output."""

    def __init__(self, out: Callable[[str], None]):
        self._out = out
        self.text = ""

    def add(self, line: str) -> None:
        self.text += line

    def flush(self) -> None:
        stamp = datetime.now(timezone.utc).strftime("%H:%M:%S.%f")[:-3]
        self._out(f"{self.text} - {stamp}")
        self.text = ""


async def pump(dispatcher: Dispatcher, stream: TextIO | None = None) -> None:
    """Dispatch one trigger per input line until EOF (stdin by default)."""
    stream = stream or sys.stdin
    buffer = LineBuffer(typer.echo)

    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        buffer.add(line.rstrip("\n"))
        await dispatcher.dispatch(buffer.flush)

    if isinstance(dispatcher, DebounceDispatcher):
        await dispatcher.join()


async def serve(factory: DebounceThrottle, dispatcher: Dispatcher) -> None:
    """Pump stdin through dispatcher, then release the factory's connections."""
    try:
        await pump(dispatcher)
    finally:
        await factory.aclose()
