"""Command/response contract shared by the server and its senders.

A command set is a closed union of :class:`IpcCommand` subclasses, each
tagged by a ``kind`` literal. The server decodes a frame into one variant
and calls :meth:`IpcCommand.process` with a context it borrows from the
caller for that single call. The server never stores the context.

Usage::

    class AddCommand(IpcCommand):
        kind: Literal["add"] = "add"
        a: int
        b: int

        def process(self, context: Any) -> IpcResponse:
            return AddResponse(c=self.a + self.b)

    Command = message_union(AddCommand, PushCommand)
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Annotated, Any, Union

from pydantic import BaseModel, Field


class IpcMessage(BaseModel):
    """Base for anything that travels in a frame. Frozen after construction."""

    model_config = {"frozen": True, "extra": "forbid"}


class IpcResponse(IpcMessage):
    """Base for response variants."""


class IpcCommand(IpcMessage):
    """Base for command variants.

    Subclasses implement :meth:`process`. It runs synchronously inside
    :meth:`IpcServer.poll` and must not block on I/O of its own.
    """

    @abstractmethod
    def process(self, context: Any) -> IpcResponse:
        """Apply this command to *context* and return the matching response."""


def message_union(*variants: type[IpcMessage]) -> Any:
    """Build a ``kind``-discriminated union over *variants*.

    Each variant must declare ``kind: Literal[...]`` with a unique value.
    A single variant is returned as-is since pydantic only accepts a
    discriminator on a real union.
    """
    if not variants:
        msg = "message_union() needs at least one variant"
        raise ValueError(msg)
    if len(variants) == 1:
        return variants[0]
    return Annotated[Union[variants], Field(discriminator="kind")]  # noqa: UP007
