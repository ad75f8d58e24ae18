"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ipcserver.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    poll_interval: float = Field(default=1.0, ge=0)
    backlog: int = Field(default=128, gt=0)


class ClientConfig(BaseModel):
    """[client] section."""

    model_config = {"frozen": True}

    timeout: float = Field(default=5.0, gt=0)

