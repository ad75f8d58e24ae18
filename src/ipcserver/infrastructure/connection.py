"""One request/response exchange on an accepted connection.

Senders write one zero-padded frame of exactly ``frame_size`` bytes. The
server never waits for it: :func:`read_available` takes only what is
already buffered, and a request counts as complete once a full frame has
arrived, the peer has closed its write side, or the bytes so far already
decode to a command (a compact, unpadded request from a peer that keeps
its end open). Anything less is dropped in the same poll.

INVARIANT: a handler failure is confined to its own connection. Nothing
raised while serving one connection escapes :func:`handle_connection`.
"""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Any

from ipcserver.errors import DecodeError, EncodeError, FrameError, TransportError
from ipcserver.infrastructure.codec import pad_frame

if TYPE_CHECKING:
    from ipcserver.infrastructure.codec import MessageCodec

logger = logging.getLogger(__name__)


def _has_pending_data(sock: socket.socket) -> bool:
    """Peek for one more byte without blocking."""
    try:
        return bool(sock.recv(1, socket.MSG_PEEK | socket.MSG_DONTWAIT))
    except BlockingIOError:
        return False
    except OSError as exc:
        msg = f"Read failed: {exc}"
        raise TransportError(msg) from exc


def read_frame(sock: socket.socket, frame_size: int) -> bytes:
    """Read one frame, blocking per the socket's timeout.

    Stops at a full frame or at EOF, whichever comes first. Raises
    :class:`FrameError` when the peer sent more than a frame and
    :class:`TransportError` on socket errors or timeout.
    """
    buf = bytearray()
    try:
        while len(buf) < frame_size:
            chunk = sock.recv(frame_size - len(buf))
            if not chunk:
                return bytes(buf)
            buf += chunk
    except OSError as exc:
        msg = f"Read failed after {len(buf)} bytes: {exc}"
        raise TransportError(msg) from exc

    if _has_pending_data(sock):
        msg = f"Message exceeds the {frame_size}-byte frame"
        raise FrameError(msg)
    return bytes(buf)


def read_available(sock: socket.socket, frame_size: int) -> tuple[bytes, bool]:
    """Read whatever is already buffered, up to one frame, never waiting.

    Returns the bytes read and whether the frame is known to be finished
    (a full frame or EOF). Raises :class:`FrameError` when a full frame is
    followed by more data.
    """
    buf = bytearray()
    try:
        while len(buf) < frame_size:
            chunk = sock.recv(frame_size - len(buf), socket.MSG_DONTWAIT)
            if not chunk:
                return bytes(buf), True
            buf += chunk
    except BlockingIOError:
        return bytes(buf), False
    except OSError as exc:
        msg = f"Read failed after {len(buf)} bytes: {exc}"
        raise TransportError(msg) from exc

    if _has_pending_data(sock):
        msg = f"Message exceeds the {frame_size}-byte frame"
        raise FrameError(msg)
    return bytes(buf), True


def write_frame(sock: socket.socket, payload: bytes) -> None:
    """Write one encoded frame."""
    try:
        sock.sendall(payload)
    except OSError as exc:
        msg = f"Write failed: {exc}"
        raise TransportError(msg) from exc


def _decode_request(codec: MessageCodec[Any, Any], frame: bytes, *, finished: bool) -> Any:
    if finished:
        return codec.decode_command(frame)
    if not frame:
        msg = "No request data available"
        raise TransportError(msg)
    # Padding has started but the frame is short: the rest is still in flight.
    if b"\x00" in frame:
        msg = f"Incomplete request: {len(frame)} of {codec.frame_size} bytes available"
        raise TransportError(msg)
    try:
        return codec.decode_command(frame)
    except DecodeError as exc:
        msg = f"Incomplete request: {len(frame)} bytes available do not form a command"
        raise TransportError(msg) from exc


def handle_connection(conn: socket.socket, codec: MessageCodec[Any, Any], context: Any) -> bool:
    """Serve a single accepted connection and close it, without blocking.

    Returns True when the command was processed and its response encoded,
    even if the peer hung up before the response could be written (the
    command's effect on *context* has already happened). Returns False when
    the connection was dropped before or during processing.
    """
    with conn:
        try:
            conn.setblocking(False)
            frame, finished = read_available(conn, codec.frame_size)
            if finished and not frame:
                logger.debug("Peer closed without sending a command")
                return False
            command = _decode_request(codec, frame, finished=finished)
        except (TransportError, FrameError, DecodeError, OSError) as exc:
            logger.warning("Dropping connection: %s", exc)
            return False

        logger.debug("Processing %s", command)
        try:
            response = command.process(context)
        except Exception:
            logger.exception("Command %s failed during processing", type(command).__name__)
            return False

        try:
            payload = pad_frame(codec.encode_response(response), codec.frame_size)
        except (EncodeError, FrameError) as exc:
            logger.warning("Dropping connection: %s", exc)
            return False

        try:
            write_frame(conn, payload)
        except TransportError as exc:
            if isinstance(exc.__cause__, (BrokenPipeError, ConnectionResetError)):
                logger.debug("Peer closed before response was written")
            else:
                logger.warning("Response not delivered: %s", exc)
            return True

        logger.debug("Responded with %s", response)
        return True
