"""Demo commands served by ``ipcserver serve``.

The context is a ``list[int]`` stack owned by the serving loop. It could
just as well be a database handle or any larger structure; the server only
lends it to one command at a time.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import NonNegativeInt

from ipcserver.domain.contract import IpcCommand, IpcResponse, message_union
from ipcserver.infrastructure.codec import MessageCodec

logger = logging.getLogger(__name__)

DEFAULT_SOCKET = "ipc-server.sock"


# --- Responses ---


class PrintAck(IpcResponse):
    """A simple acknowledgment."""

    kind: Literal["print_ack"] = "print_ack"


class AddResponse(IpcResponse):
    """The sum result."""

    kind: Literal["add"] = "add"
    c: NonNegativeInt


class PushResponse(IpcResponse):
    """The value pushed."""

    kind: Literal["push"] = "push"
    x: NonNegativeInt


# --- Commands ---


class PrintCommand(IpcCommand):
    kind: Literal["print"] = "print"
    payload: str

    def process(self, context: list[int]) -> PrintAck:
        logger.info("Print command received: %s", self.payload)
        return PrintAck()


class AddCommand(IpcCommand):
    kind: Literal["add"] = "add"
    a: NonNegativeInt
    b: NonNegativeInt

    def process(self, context: list[int]) -> AddResponse:
        c = self.a + self.b
        logger.info("Add command received: %d + %d = %d", self.a, self.b, c)
        return AddResponse(c=c)


class PushCommand(IpcCommand):
    kind: Literal["push"] = "push"
    x: NonNegativeInt

    def process(self, context: list[int]) -> PushResponse:
        logger.info("Push command received: %d", self.x)
        context.append(self.x)
        return PushResponse(x=self.x)


DemoCommand = message_union(PrintCommand, AddCommand, PushCommand)
DemoResponse = message_union(PrintAck, AddResponse, PushResponse)

DEMO_CODEC: MessageCodec[IpcCommand, IpcResponse] = MessageCodec(DemoCommand, DemoResponse)
