"""CLI command for a debounced echo loop.

Usage:
    debounce-throttle debounce --id demo --interval-ms 500 --max-delay-ms 1500
"""

from __future__ import annotations

import asyncio
from datetime import timedelta

import typer

from debounce_throttle.cli.runtime import build_factory, serve

app = typer.Typer(help="Echo stdin through a debounce dispatcher")


@app.callback(invoke_without_command=True)
def debounce(
    dispatcher_id: str = typer.Option("test", "--id", help="Dispatcher identity"),
    interval_ms: int = typer.Option(500, "--interval-ms", "-i", min=1, help="Quiet period"),
    max_delay_ms: int | None = typer.Option(
        None, "--max-delay-ms", "-m", min=1, help="Upper bound from first trigger to output"
    ),
    redis_url: str | None = typer.Option(
        None, "--redis-url", help="Redis URL (defaults to settings)"
    ),
    in_memory: bool = typer.Option(
        False, "--in-memory", help="Coordinate within this process only"
    ),
) -> None:
    """Print buffered input once the input has been quiet for the interval."""
    factory = build_factory(redis_url, in_memory)
    dispatcher = factory.debounce_dispatcher(
        dispatcher_id,
        timedelta(milliseconds=interval_ms),
        timedelta(milliseconds=max_delay_ms) if max_delay_ms else None,
    )
    asyncio.run(serve(factory, dispatcher))
