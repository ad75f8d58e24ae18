"""Tests for the one-shot send() client."""

from __future__ import annotations

import socket
from pathlib import Path

import pytest

from ipcserver.demo.commands import (
    DEMO_CODEC,
    AddCommand,
    AddResponse,
    PrintAck,
    PrintCommand,
    PushCommand,
    PushResponse,
)
from ipcserver.errors import EncodeError, TransportError
from ipcserver.infrastructure.client import send
from ipcserver.infrastructure.codec import pad_frame
from ipcserver.infrastructure.connection import read_frame
from ipcserver.infrastructure.server import IpcServer
from tests.helpers import BackgroundPoller, poll_until, send_in_thread


class TestSend:
    def test_round_trip(self, server: IpcServer, socket_path: Path) -> None:
        stack: list[int] = []
        thread, outcome = send_in_thread(AddCommand(a=5, b=3), socket_path)

        assert poll_until(server, stack, 1) == 1
        thread.join(timeout=5)

        assert outcome == {"response": AddResponse(c=8)}
        assert stack == []

    def test_push_reaches_context(self, server: IpcServer, socket_path: Path) -> None:
        stack: list[int] = []
        with BackgroundPoller(server, stack):
            response = send(PushCommand(x=69), socket_path, DEMO_CODEC, timeout=5)
        assert response == PushResponse(x=69)
        assert stack == [69]

    def test_two_senders_get_their_own_responses(
        self, server: IpcServer, socket_path: Path
    ) -> None:
        stack: list[int] = []
        first, first_outcome = send_in_thread(AddCommand(a=1, b=2), socket_path)
        second, second_outcome = send_in_thread(PrintCommand(payload="hi"), socket_path)

        assert poll_until(server, stack, 2) == 2
        first.join(timeout=5)
        second.join(timeout=5)

        assert first_outcome == {"response": AddResponse(c=3)}
        assert second_outcome == {"response": PrintAck()}

    def test_no_wait_returns_immediately(self, server: IpcServer, socket_path: Path) -> None:
        stack: list[int] = []
        assert send(PushCommand(x=4), socket_path, DEMO_CODEC, wait=False) is None
        assert server.poll(stack) == 1
        assert stack == [4]

    def test_oversized_command_never_connects(
        self, server: IpcServer, socket_path: Path
    ) -> None:
        with pytest.raises(EncodeError):
            send(PrintCommand(payload="x" * 2000), socket_path, DEMO_CODEC, timeout=1)
        assert server.poll([]) == 0

    def test_no_server(self, socket_path: Path) -> None:
        with pytest.raises(TransportError, match="Cannot connect"):
            send(AddCommand(a=1, b=1), socket_path, DEMO_CODEC, timeout=1)

    def test_server_never_polls(self, server: IpcServer, socket_path: Path) -> None:
        with pytest.raises(TransportError, match="Read failed"):
            send(AddCommand(a=1, b=1), socket_path, DEMO_CODEC, timeout=0.1)

    def test_connection_dropped_without_response(self, socket_path: Path) -> None:
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        listener.bind(str(socket_path))
        listener.listen(1)
        try:
            thread, outcome = send_in_thread(AddCommand(a=1, b=1), socket_path)
            conn, _ = listener.accept()
            with conn:
                while conn.recv(4096):
                    pass
            thread.join(timeout=5)
        finally:
            listener.close()

        assert isinstance(outcome["error"], TransportError)
        assert "without a response" in str(outcome["error"])

    def test_request_is_one_padded_frame(self, socket_path: Path) -> None:
        listener = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        listener.bind(str(socket_path))
        listener.listen(1)
        try:
            send(PushCommand(x=3), socket_path, DEMO_CODEC, wait=False)
            conn, _ = listener.accept()
            with conn:
                conn.settimeout(5)
                received = read_frame(conn, DEMO_CODEC.frame_size)
        finally:
            listener.close()

        assert received == pad_frame(DEMO_CODEC.encode_command(PushCommand(x=3)))
