"""Typer CLI definition for xees."""

import asyncio
import logging

import typer

from .config import generate_config, load_config
from .daemon.control import MAX_DURATION
from .errors import XeesError

app = typer.Typer(
    help="Suppress xscreensaver for a while, then let it lock again",
    invoke_without_command=True,
)

_debug = False


def call_daemon(operation: str, *args: int | None) -> str:
    """Run one client call against the daemon and return its reply.

    Args:
        operation: Client method name ("enable", "disable", "status", "quit")
        *args: Arguments for that method

    Returns:
        The daemon's reply string

    Raises:
        typer.Exit: With code 1 if the daemon cannot be reached or rejects the call
    """
    from .daemon.client import XeesClient

    client = XeesClient(timeout=load_config().client.timeout)
    try:
        return asyncio.run(getattr(client, operation)(*args))
    except (XeesError, ValueError) as e:
        if _debug:
            typer.echo(f"Debug - {operation} failed: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """Run the daemon when no command is given."""
    global _debug
    _debug = debug

    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    if ctx.invoked_subcommand is None:
        from .daemon.__main__ import run

        run(debug)


@app.command()
def enable() -> None:
    """Let the screensaver lock the screen again."""
    call_daemon("enable")


@app.command()
def disable(
    seconds: int | None = typer.Argument(
        None,
        min=0,
        max=MAX_DURATION,
        help="How long to suppress the screensaver (default from config)",
    ),
    forever: bool = typer.Option(
        False, "--forever", help="Suppress until `xees enable` is called"
    ),
) -> None:
    """Keep the screensaver from locking the screen."""
    if forever:
        call_daemon("disable", None)
        return

    if seconds is None:
        seconds = load_config().daemon.default_duration
    call_daemon("disable", seconds)


@app.command()
def status() -> None:
    """Print "Enabled" or "Disabled"."""
    typer.echo(call_daemon("status"))


@app.command("quit")
def quit_daemon() -> None:
    """Stop the daemon."""
    call_daemon("quit")


@app.command("init-config")
def init_config() -> None:
    """Write the default config file and print its path."""
    typer.echo(str(generate_config()))
