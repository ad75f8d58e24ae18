"""Locate ipcserver.toml.

Resolution order: the IPCSERVER_CONFIG env var, then a walk up from the
working directory (the way git finds .git/). ``--config`` bypasses both.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "ipcserver.toml"
CONFIG_ENV_VAR = "IPCSERVER_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ipcserver.toml at or above *start*, or None.

    A set but dangling IPCSERVER_CONFIG disables discovery rather than
    silently falling back to another file.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
