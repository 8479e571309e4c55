"""CLI commands for debounce-throttle.

Provides interactive demos using Typer:
- debounce-throttle throttle: echo stdin at most once per interval
- debounce-throttle debounce: echo stdin after it goes quiet

Usage:
    debounce-throttle --help
    debounce-throttle throttle --interval-ms 500
    debounce-throttle debounce --interval-ms 500 --max-delay-ms 1500
"""

import typer

from debounce_throttle.cli.debounce_cmd import app as debounce_app
from debounce_throttle.cli.throttle_cmd import app as throttle_app

app = typer.Typer(
    name="debounce-throttle",
    help="Distributed debounce and throttle dispatchers",
    no_args_is_help=True,
)

app.add_typer(throttle_app, name="throttle")
app.add_typer(debounce_app, name="debounce")


@app.callback()
def callback() -> None:
    """Distributed debounce and throttle dispatchers."""
    pass


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
