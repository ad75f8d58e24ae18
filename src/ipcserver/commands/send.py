"""send — one-shot client for the demo command set."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import click

from ipcserver.commands._base import ExampleGroup
from ipcserver.commands._context import AppContext

if TYPE_CHECKING:
    from ipcserver.domain.contract import IpcCommand


def _exchange_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Options shared by every ``send`` subcommand."""
    func = click.option(
        "--timeout",
        type=click.FloatRange(min=0, min_open=True),
        default=None,
        help="Seconds to wait per socket operation (default: [client] timeout).",
    )(func)
    func = click.option(
        "--no-wait",
        is_flag=True,
        help="Return right after writing; do not wait for the response.",
    )(func)
    return func


def _dispatch(
    app: AppContext, command: IpcCommand, *, no_wait: bool, timeout: float | None
) -> None:
    from ipcserver.demo.commands import DEMO_CODEC
    from ipcserver.errors import IpcError
    from ipcserver.infrastructure.client import send as send_command

    settings = app.settings
    try:
        response = send_command(
            command,
            settings.socket_path,
            DEMO_CODEC,
            timeout=settings.client.timeout if timeout is None else timeout,
            wait=not no_wait,
        )
    except IpcError as exc:
        app.fail(exc)
    app.emit(response)


@click.group(
    cls=ExampleGroup,
    examples="""\
  # Ask the server to log a message
  ipcserver send print "hello"

  # Add two numbers
  ipcserver send add 5 3

  # Push onto the server's stack without waiting for the reply
  ipcserver send push 69 --no-wait""",
)
def send() -> None:
    """Send one command to a running server and print its response."""


@send.command("print")
@click.argument("payload")
@_exchange_options
@click.pass_obj
def print_cmd(app: AppContext, payload: str, no_wait: bool, timeout: float | None) -> None:
    """Have the server log PAYLOAD."""
    from ipcserver.demo.commands import PrintCommand

    _dispatch(app, PrintCommand(payload=payload), no_wait=no_wait, timeout=timeout)


@send.command("add")
@click.argument("a", type=click.IntRange(min=0))
@click.argument("b", type=click.IntRange(min=0))
@_exchange_options
@click.pass_obj
def add_cmd(app: AppContext, a: int, b: int, no_wait: bool, timeout: float | None) -> None:
    """Have the server compute A + B."""
    from ipcserver.demo.commands import AddCommand

    _dispatch(app, AddCommand(a=a, b=b), no_wait=no_wait, timeout=timeout)


@send.command("push")
@click.argument("x", type=click.IntRange(min=0))
@_exchange_options
@click.pass_obj
def push_cmd(app: AppContext, x: int, no_wait: bool, timeout: float | None) -> None:
    """Push X onto the server's stack."""
    from ipcserver.demo.commands import PushCommand

    _dispatch(app, PushCommand(x=x), no_wait=no_wait, timeout=timeout)
