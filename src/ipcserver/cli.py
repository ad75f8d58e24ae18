"""Root CLI group for ipcserver with global flags and command registration."""

from __future__ import annotations

import click

from ipcserver import __version__
from ipcserver.commands import register_commands
from ipcserver.commands._context import AppContext
from ipcserver.config.settings import IpcSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="ipcserver")
@click.option(
    "-s",
    "--socket",
    "socket_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Socket path (default: ipc-server.sock).",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    socket_path: str | None,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """ipcserver — local IPC over an owner-only Unix socket."""
    settings = IpcSettings.from_cli(
        config_path=config_path,
        socket_path=socket_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)


def main() -> None:
    cli()
