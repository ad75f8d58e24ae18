"""Exception taxonomy for ipcserver.

Setup-time errors (:class:`BindError` and its subclass) are fatal and reach
the caller of :meth:`IpcServer.create`. Everything else describes a single
connection or a single send; the server contains those per connection and
never lets them abort a poll.
"""

from __future__ import annotations


class IpcError(Exception):
    """Base class for every error raised by ipcserver."""


class BindError(IpcError):
    """The listening socket could not be created at the requested path."""


class SocketPermissionError(BindError):
    """Owner-only access could not be applied to the socket path."""


class ServerClosedError(IpcError):
    """The server was used after :meth:`IpcServer.shutdown`."""


class TransportError(IpcError):
    """Connect, accept, read or write failed on the socket."""


class FrameError(IpcError):
    """A payload does not fit within the fixed frame size."""


class DecodeError(IpcError):
    """A frame does not hold a valid encoding of the expected message type."""


class EncodeError(IpcError):
    """A value could not be encoded, or its encoding exceeds the frame size."""
