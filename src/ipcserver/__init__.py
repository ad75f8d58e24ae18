"""ipcserver — poll-driven local IPC over owner-only Unix domain sockets.

The integrating application owns the loop: it creates an :class:`IpcServer`,
calls :meth:`IpcServer.poll` whenever it has a moment, and lends its own
state to each command for the duration of one ``process()`` call.
"""

from __future__ import annotations

__version__ = "0.1.0"

from ipcserver.domain.contract import IpcCommand, IpcMessage, IpcResponse, message_union
from ipcserver.errors import (
    BindError,
    DecodeError,
    EncodeError,
    FrameError,
    IpcError,
    ServerClosedError,
    SocketPermissionError,
    TransportError,
)
from ipcserver.infrastructure.client import send
from ipcserver.infrastructure.codec import FRAME_SIZE, FrameCodec, MessageCodec
from ipcserver.infrastructure.server import IpcServer

__all__ = [
    "FRAME_SIZE",
    "BindError",
    "DecodeError",
    "EncodeError",
    "FrameCodec",
    "FrameError",
    "IpcCommand",
    "IpcError",
    "IpcMessage",
    "IpcResponse",
    "IpcServer",
    "MessageCodec",
    "ServerClosedError",
    "SocketPermissionError",
    "TransportError",
    "__version__",
    "message_union",
    "send",
]
