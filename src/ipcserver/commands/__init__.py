"""Subcommand modules for the ipcserver CLI.

Provides register_commands(), which attaches every command to the root group.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``serve`` command and the ``send`` group on the root CLI."""
    from ipcserver.commands.send import send
    from ipcserver.commands.serve import serve

    cli.add_command(serve)
    cli.add_command(send)
