"""IpcServer — a lazy, poll-driven Unix domain socket server.

There is no server thread. The owning application calls :meth:`IpcServer.poll`
from its own loop; each call accepts whatever connections are already
waiting, serves them one after another, and returns without waiting for
more.

INVARIANT: the socket path is mode 0600 for as long as it exists, and it
is removed when the server shuts down.
"""

from __future__ import annotations

import logging
import os
import socket
import stat
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ipcserver.errors import BindError, ServerClosedError, SocketPermissionError, TransportError
from ipcserver.infrastructure.connection import handle_connection

if TYPE_CHECKING:
    from types import TracebackType

    from ipcserver.infrastructure.codec import MessageCodec

logger = logging.getLogger(__name__)

SOCKET_MODE = 0o600
DEFAULT_BACKLOG = 128


def _is_live_socket(path: Path) -> bool:
    """True if a server still owns *path*.

    Only a refused connection marks the node as stale. Any other failure,
    such as a full backlog, means a listener may still be there.
    """
    probe = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    try:
        probe.setblocking(False)
        probe.connect(str(path))
    except (ConnectionRefusedError, FileNotFoundError):
        return False
    except BlockingIOError:
        return True
    except OSError as exc:
        msg = f"Cannot probe existing socket {path}: {exc}"
        raise BindError(msg) from exc
    finally:
        probe.close()
    return True


def _clear_stale_socket(path: Path) -> None:
    """Remove a socket node left behind by a server that is no longer running.

    Refuses to touch regular files or a socket that still has a listener.
    """
    try:
        mode = path.lstat().st_mode
    except FileNotFoundError:
        return
    except OSError as exc:
        msg = f"Cannot inspect {path}: {exc}"
        raise BindError(msg) from exc

    if not stat.S_ISSOCK(mode):
        msg = f"{path} exists and is not a socket"
        raise BindError(msg)
    if _is_live_socket(path):
        msg = f"{path} is already in use by a running server"
        raise BindError(msg)

    logger.info("Removing stale socket %s", path)
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        msg = f"Cannot remove stale socket {path}: {exc}"
        raise BindError(msg) from exc


class IpcServer:
    """Owns one bound, owner-only listening socket.

    Use :meth:`create` rather than the constructor. The server may be used
    as a context manager; leaving the block calls :meth:`shutdown`.

    Not safe for concurrent :meth:`poll` calls from several threads. Callers
    must serialize access.
    """

    def __init__(
        self,
        listener: socket.socket,
        path: Path,
        codec: MessageCodec[Any, Any],
    ) -> None:
        self._listener: socket.socket | None = listener
        self._path = path
        self._codec = codec

    @classmethod
    def create(
        cls,
        path: str | os.PathLike[str],
        codec: MessageCodec[Any, Any],
        *,
        backlog: int = DEFAULT_BACKLOG,
    ) -> IpcServer:
        """Bind a non-blocking listener at *path* and restrict it to the owner.

        Raises :class:`BindError` if the path is held by a live server, is
        not a socket, or cannot be bound, and :class:`SocketPermissionError`
        if its mode cannot be set.
        """
        sock_path = Path(path)
        _clear_stale_socket(sock_path)

        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            listener.bind(str(sock_path))
        except OSError as exc:
            listener.close()
            msg = f"Cannot bind {sock_path}: {exc}"
            raise BindError(msg) from exc

        try:
            os.chmod(sock_path, SOCKET_MODE)
        except OSError as exc:
            listener.close()
            sock_path.unlink(missing_ok=True)
            msg = f"Cannot restrict permissions on {sock_path}: {exc}"
            raise SocketPermissionError(msg) from exc

        try:
            listener.listen(backlog)
            listener.setblocking(False)
        except OSError as exc:
            listener.close()
            sock_path.unlink(missing_ok=True)
            msg = f"Cannot listen on {sock_path}: {exc}"
            raise BindError(msg) from exc

        logger.debug("Listening on %s", sock_path)
        return cls(listener, sock_path, codec)

    @property
    def path(self) -> Path:
        """Filesystem path of the socket."""
        return self._path

    @property
    def closed(self) -> bool:
        return self._listener is None

    def fileno(self) -> int:
        """Listener descriptor, for registering with an external selector."""
        if self._listener is None:
            msg = "Server has been shut down"
            raise ServerClosedError(msg)
        return self._listener.fileno()

    def poll(self, context: Any) -> int:
        """Serve every connection already waiting; never wait for a new one.

        *context* is lent to each command's ``process()`` in turn and is
        not retained. Returns the number of commands processed, which is 0
        when nothing was pending.
        """
        if self._listener is None:
            msg = "Cannot poll a server that has been shut down"
            raise ServerClosedError(msg)

        processed = 0
        while True:
            try:
                conn, _ = self._listener.accept()
            except (BlockingIOError, InterruptedError):
                break
            except ConnectionAbortedError:
                logger.debug("Connection aborted before accept completed")
                continue
            except OSError as exc:
                msg = f"Accept failed on {self._path}: {exc}"
                raise TransportError(msg) from exc

            if handle_connection(conn, self._codec, context):
                processed += 1

        if processed:
            logger.debug("Processed %d command(s)", processed)
        return processed

    def shutdown(self) -> None:
        """Close the listener and remove the socket path. Idempotent."""
        if self._listener is None:
            return
        listener, self._listener = self._listener, None
        listener.close()
        try:
            self._path.unlink()
        except FileNotFoundError:
            pass
        except OSError:
            logger.warning("Could not remove socket %s", self._path, exc_info=True)
        logger.debug("Shut down server on %s", self._path)

    def __enter__(self) -> IpcServer:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"IpcServer(path={str(self._path)!r}, {state})"
