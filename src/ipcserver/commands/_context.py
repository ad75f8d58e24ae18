"""AppContext — shared Click context for all commands.

Created once by the root CLI group and reached by subcommands through
``@click.pass_obj``. Configures logging and routes output (stdout for
results, stderr plus exit code 1 for failures).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click

from ipcserver.output.formatters import format_error, format_response

if TYPE_CHECKING:
    from ipcserver.config.settings import IpcSettings
    from ipcserver.domain.contract import IpcResponse


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: IpcSettings) -> None:
        self.settings = settings

        from ipcserver.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, response: IpcResponse | None) -> None:
        """Write a response to stdout."""
        click.echo(format_response(response, json_output=self.settings.json_output))

    def fail(self, error: Exception) -> NoReturn:
        """Write a failure to stderr and exit with code 1."""
        click.echo(format_error(error, json_output=self.settings.json_output), err=True)
        raise SystemExit(1)
