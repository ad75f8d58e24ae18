"""Render responses and send failures for humans or machines (--json)."""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.text import Text

from ipcserver.output.console import create_console, get_output

if TYPE_CHECKING:
    from ipcserver.domain.contract import IpcResponse


def _kind(response: IpcResponse) -> str:
    return str(getattr(response, "kind", type(response).__name__))


def _fields(response: IpcResponse) -> dict[str, Any]:
    data = response.model_dump(mode="json")
    data.pop("kind", None)
    return data


def format_response(response: IpcResponse | None, *, json_output: bool = False) -> str:
    """Format a response; None means the send did not wait for one."""
    if response is None:
        if json_output:
            return _json.dumps({"ok": True, "response": None})
        return "SENT (no response requested)"

    if json_output:
        return _json.dumps({"ok": True, "response": response.model_dump(mode="json")}, indent=2)

    console = create_console()
    console.print(Text("OK", style="ipc.ok"), Text(_kind(response), style="ipc.kind"), sep="  ")
    for key, value in _fields(response).items():
        console.print(Text(f"  {key}: ", style="ipc.key"), Text(str(value)), sep="")
    return get_output(console).rstrip("\n")


def format_error(error: Exception, *, json_output: bool = False) -> str:
    """Format a failed send."""
    if json_output:
        payload = {"ok": False, "error": {"type": type(error).__name__, "message": str(error)}}
        return _json.dumps(payload, indent=2)
    return f"ERROR: {type(error).__name__} — {error}"
