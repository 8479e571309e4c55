"""CLI command for a throttled echo loop.

Usage:
    debounce-throttle throttle --id demo --interval-ms 500
    debounce-throttle throttle --in-memory
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import typer

from debounce_throttle.cli.runtime import build_factory, serve

app = typer.Typer(help="Echo stdin through a throttle dispatcher")


@app.callback(invoke_without_command=True)
def throttle(
    dispatcher_id: str = typer.Option("test", "--id", help="Dispatcher identity"),
    interval_ms: int = typer.Option(
        500, "--interval-ms", "-i", min=1, help="Throttle interval"
    ),
    redis_url: str | None = typer.Option(
        None, "--redis-url", help="Redis URL (defaults to settings)"
    ),
    in_memory: bool = typer.Option(
        False, "--in-memory", help="Coordinate within this process only"
    ),
) -> None:
    """Print buffered input at most once per interval."""
    factory = build_factory(redis_url, in_memory)
    dispatcher = factory.throttle_dispatcher(dispatcher_id, timedelta(milliseconds=interval_ms))
    asyncio.run(serve(factory, dispatcher))
