"""One-shot sender: connect, write one command, read one response.

No retry, reconnection, or keep-alive. Retry policy belongs to the caller.
"""

from __future__ import annotations

import logging
import os
import socket
from typing import TYPE_CHECKING, TypeVar

from ipcserver.errors import TransportError
from ipcserver.infrastructure.codec import pad_frame
from ipcserver.infrastructure.connection import read_frame, write_frame

if TYPE_CHECKING:
    from ipcserver.infrastructure.codec import MessageCodec

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")


def send(
    command: C,
    path: str | os.PathLike[str],
    codec: MessageCodec[C, R],
    *,
    timeout: float | None = None,
    wait: bool = True,
) -> R | None:
    """Send *command* to the server listening at *path*.

    The command is encoded and zero-padded to one full frame before
    connecting, so an oversized command fails with :class:`EncodeError`
    without touching the socket. With ``wait=False`` the connection is
    closed right after the write and None is returned. Otherwise blocks (up
    to *timeout* per socket operation) until the server polls and answers,
    and returns the decoded response.

    Raises :class:`TransportError` on connect or I/O failure, or when the
    server closed the connection without answering.
    """
    payload = pad_frame(codec.encode_command(command), codec.frame_size)

    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as sock:
        try:
            sock.settimeout(timeout)
            sock.connect(os.fspath(path))
        except OSError as exc:
            msg = f"Cannot connect to {os.fspath(path)}: {exc}"
            raise TransportError(msg) from exc

        write_frame(sock, payload)
        logger.debug("Sent %s", command)
        if not wait:
            return None

        try:
            sock.shutdown(socket.SHUT_WR)
        except OSError as exc:
            msg = f"Cannot finish request: {exc}"
            raise TransportError(msg) from exc
        frame = read_frame(sock, codec.frame_size)

    if not frame:
        msg = "Server closed the connection without a response"
        raise TransportError(msg)
    response = codec.decode_response(frame)
    logger.debug("Received %s", response)
    return response
