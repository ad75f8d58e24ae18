"""Socket-level helpers shared by the server, client, and CLI tests."""

from __future__ import annotations

import select
import socket
import threading
import time
from pathlib import Path
from typing import Any

from ipcserver.demo.commands import DEMO_CODEC
from ipcserver.infrastructure.client import send
from ipcserver.infrastructure.server import IpcServer

SENDER_SETTLE = 0.05


def open_request(path: Path, payload: bytes) -> socket.socket:
    """Connect, write *payload*, and half-close, leaving the reply unread.

    The connection sits in the listener's backlog until the next poll.
    """
    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    sock.settimeout(5)
    sock.connect(str(path))
    sock.sendall(payload)
    sock.shutdown(socket.SHUT_WR)
    return sock


def read_reply(sock: socket.socket) -> bytes:
    """Read until the server closes the connection, then close our end.

    A reset (the server dropped us with request bytes still unread) reads as
    no reply at all.
    """
    chunks = []
    with sock:
        try:
            while chunk := sock.recv(4096):
                chunks.append(chunk)
        except ConnectionResetError:
            return b""
    return b"".join(chunks)


def send_in_thread(
    command: Any, path: Path, codec: Any = DEMO_CODEC, **kwargs: Any
) -> tuple[threading.Thread, dict[str, Any]]:
    """Run send() on a worker thread; the outcome lands in the returned dict."""
    outcome: dict[str, Any] = {}

    def run() -> None:
        try:
            outcome["response"] = send(command, path, codec, timeout=5, **kwargs)
        except Exception as exc:
            outcome["error"] = exc

    thread = threading.Thread(target=run, daemon=True)
    thread.start()
    return thread, outcome


def wait_for_sender(server: IpcServer, timeout: float) -> bool:
    """Wait until a connection is queued, then give its sender time to write.

    The server never waits for request bytes, so a poll that accepts a
    connection before the sending thread has written would drop it.
    """
    ready, _, _ = select.select([server], [], [], timeout)
    if ready:
        time.sleep(SENDER_SETTLE)
    return bool(ready)


def poll_until(server: IpcServer, context: Any, expected: int, *, deadline: float = 5.0) -> int:
    """Poll until *expected* commands have been processed or *deadline* passes."""
    processed = 0
    stop = time.monotonic() + deadline
    while processed < expected and time.monotonic() < stop:
        if wait_for_sender(server, max(stop - time.monotonic(), 0)):
            processed += server.poll(context)
    return processed


class BackgroundPoller:
    """Polls a server on a worker thread so the test thread can act as a client."""

    def __init__(self, server: IpcServer, context: Any) -> None:
        self._server = server
        self._context = context
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self.processed = 0

    def _run(self) -> None:
        while not self._stop.is_set():
            if wait_for_sender(self._server, 0.01):
                self.processed += self._server.poll(self._context)

    def __enter__(self) -> BackgroundPoller:
        self._thread.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._stop.set()
        self._thread.join(timeout=5)
