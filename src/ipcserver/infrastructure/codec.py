"""Wire codec: typed messages to and from bounded frames.

A frame carries exactly one value encoded as compact UTF-8 JSON through a
pydantic ``TypeAdapter``. JSON never contains a raw NUL byte, so any
trailing zero padding after the payload is stripped before decoding and can
never be mistaken for data.

INVARIANT: an encoded payload never exceeds ``frame_size``. Oversized
values are rejected, never truncated.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ipcserver.errors import DecodeError, EncodeError, FrameError

FRAME_SIZE = 1024

C = TypeVar("C")
R = TypeVar("R")
T = TypeVar("T")


def pad_frame(payload: bytes, frame_size: int = FRAME_SIZE) -> bytes:
    """Zero-pad *payload* to the full fixed-size buffer."""
    if len(payload) > frame_size:
        msg = f"Payload of {len(payload)} bytes exceeds the {frame_size}-byte frame"
        raise FrameError(msg)
    return payload.ljust(frame_size, b"\x00")


class FrameCodec(Generic[T]):
    """Encode and decode one message type within a fixed frame size.

    Parameters:
        message_type: A pydantic model, or a union built by
            :func:`ipcserver.domain.contract.message_union`.
        frame_size: Upper bound on the encoded size in bytes.
    """

    def __init__(self, message_type: Any, *, frame_size: int = FRAME_SIZE) -> None:
        if frame_size <= 0:
            msg = f"frame_size must be positive, got {frame_size}"
            raise ValueError(msg)
        self._adapter: TypeAdapter[T] = TypeAdapter(message_type)
        self.frame_size = frame_size

    def encode(self, value: T) -> bytes:
        """Serialize *value*, raising :class:`EncodeError` if it cannot fit.

        *value* must already be an instance of the message type; anything
        else, None included, is rejected rather than serialized as-is.
        """
        try:
            self._adapter.validate_python(value)
            payload = self._adapter.dump_json(value, warnings="error")
        except (PydanticSerializationError, ValidationError, ValueError, TypeError) as exc:
            msg = f"Cannot encode {type(value).__name__}: {exc}"
            raise EncodeError(msg) from exc
        if len(payload) > self.frame_size:
            msg = (
                f"Encoded {type(value).__name__} is {len(payload)} bytes, "
                f"frame size is {self.frame_size}"
            )
            raise EncodeError(msg)
        return payload

    def decode(self, frame: bytes) -> T:
        """Deserialize one value from *frame*, ignoring trailing zero padding."""
        if len(frame) > self.frame_size:
            msg = f"Frame of {len(frame)} bytes exceeds the {self.frame_size}-byte limit"
            raise FrameError(msg)
        payload = bytes(frame).rstrip(b"\x00")
        if not payload:
            msg = "Empty frame"
            raise DecodeError(msg)
        try:
            return self._adapter.validate_json(payload)
        except ValidationError as exc:
            msg = f"Malformed frame: {exc.error_count()} validation error(s)"
            raise DecodeError(msg) from exc
        except ValueError as exc:
            msg = f"Malformed frame: {exc}"
            raise DecodeError(msg) from exc


class MessageCodec(Generic[C, R]):
    """Both directions of one command set: commands in, responses out.

    The server and every sender of a given command set share one instance.
    """

    def __init__(
        self,
        command_type: Any,
        response_type: Any,
        *,
        frame_size: int = FRAME_SIZE,
    ) -> None:
        self.commands: FrameCodec[C] = FrameCodec(command_type, frame_size=frame_size)
        self.responses: FrameCodec[R] = FrameCodec(response_type, frame_size=frame_size)
        self.frame_size = frame_size

    def encode_command(self, command: C) -> bytes:
        return self.commands.encode(command)

    def decode_command(self, frame: bytes) -> C:
        return self.commands.decode(frame)

    def encode_response(self, response: R) -> bytes:
        return self.responses.encode(response)

    def decode_response(self, frame: bytes) -> R:
        return self.responses.decode(frame)
