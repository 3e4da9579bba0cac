"""CLI for the HR console demo app.

Commands::

    uv run demo                # Run the Reflex demo app
    uv run demo run            # Same as above
    uv run demo run --port 3001
"""

import os
from pathlib import Path
from typing import Annotated, Optional

import typer

app = typer.Typer(
    name="demo",
    help="HR console demo app for reflex-data-table.",
    invoke_without_command=True,
)


def _run_app(port: int | None = None) -> None:
    """Start the Reflex demo app."""
    app_dir = Path(__file__).resolve().parent.parent
    os.chdir(app_dir)

    from reflex.reflex import cli

    args = ["run"]
    if port is not None:
        args += ["--frontend-port", str(port)]
    cli(args)


@app.callback(invoke_without_command=True)
def default(ctx: typer.Context) -> None:
    """Run the demo app (default when no subcommand is given)."""
    if ctx.invoked_subcommand is None:
        _run_app()


@app.command()
def run(
    port: Annotated[Optional[int], typer.Option("--port", "-p", help="Port for the Reflex frontend")] = None,
) -> None:
    """Run the Reflex demo app."""
    _run_app(port)


def main() -> None:
    """Entry point for the demo CLI."""
    app()


if __name__ == "__main__":
    main()
