"""Rich Console factory and theme for ipcserver output.

Consoles render to a StringIO buffer so formatters can return plain
strings. In non-TTY environments (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

IPC_THEME = Theme(
    {
        "ipc.ok": "bold green",
        "ipc.kind": "bold cyan",
        "ipc.key": "dim",
    }
)


def create_console() -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(file=StringIO(), theme=IPC_THEME, highlight=False, width=120)


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
