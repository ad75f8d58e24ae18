"""Shared pytest fixtures for ipcserver tests."""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from ipcserver.demo.commands import DEMO_CODEC
from ipcserver.infrastructure.server import IpcServer


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo configure_logging() calls made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    ipc = logging.getLogger("ipcserver")
    ipc_level = ipc.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    ipc.setLevel(ipc_level)


@pytest.fixture
def socket_dir() -> Generator[Path]:
    """Short temp directory for sockets.

    ``tmp_path`` can exceed the ~108-byte AF_UNIX path limit, so sockets
    live under a short mkdtemp() directory instead.
    """
    path = Path(tempfile.mkdtemp(prefix="ipc-", dir="/tmp"))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def socket_path(socket_dir: Path) -> Path:
    return socket_dir / "test.sock"


@pytest.fixture
def server(socket_path: Path) -> Generator[IpcServer]:
    """Demo server bound at ``socket_path``, shut down after the test."""
    srv = IpcServer.create(socket_path, DEMO_CODEC)
    try:
        yield srv
    finally:
        srv.shutdown()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from an empty directory with no config overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")``.
    """
    monkeypatch.chdir(tmp_path)
    for var in ("IPCSERVER_CONFIG", "IPCSERVER_SOCKET_PATH"):
        monkeypatch.delenv(var, raising=False)
