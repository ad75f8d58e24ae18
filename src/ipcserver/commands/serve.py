"""serve — bind the demo command set and poll it until interrupted."""

from __future__ import annotations

import time

import click
import structlog

from ipcserver.commands._base import ExampleCommand
from ipcserver.commands._context import AppContext

log = structlog.get_logger(__name__)


@click.command(
    cls=ExampleCommand,
    examples="""\
  # Serve on the configured socket, polling once a second
  ipcserver serve

  # Poll ten times a second on a custom socket
  ipcserver --socket /tmp/app.sock serve --interval 0.1

  # Poll three times, then shut down
  ipcserver serve --max-polls 3""",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds between polls (default: [server] poll_interval).",
)
@click.option(
    "--max-polls",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many polls (default: run until interrupted).",
)
@click.pass_obj
def serve(app: AppContext, interval: float | None, max_polls: int | None) -> None:
    """Serve the demo commands (print, add, push) on the IPC socket."""
    from ipcserver.demo.commands import DEMO_CODEC
    from ipcserver.errors import BindError, TransportError
    from ipcserver.infrastructure.server import IpcServer

    settings = app.settings
    if interval is None:
        interval = settings.server.poll_interval

    try:
        server = IpcServer.create(
            settings.socket_path,
            DEMO_CODEC,
            backlog=settings.server.backlog,
        )
    except BindError as exc:
        app.fail(exc)

    # Application state lent to each command for the length of one process().
    stack: list[int] = []
    polls = 0
    log.info("serve.start", socket=str(server.path), interval=interval)
    with server:
        try:
            while max_polls is None or polls < max_polls:
                processed = server.poll(stack)
                polls += 1
                if processed:
                    log.info("serve.poll", processed=processed, stack=list(stack))
                if max_polls is None or polls < max_polls:
                    time.sleep(interval)
        except KeyboardInterrupt:
            log.info("serve.interrupted")
        except TransportError as exc:
            app.fail(exc)
    log.info("serve.stop", polls=polls, stack=list(stack))
