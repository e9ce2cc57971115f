"""Output helpers for dis-dbg."""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional

from .context import DebuggerContext
from ..disasm import format_registers


def _json_dump(payload: Mapping[str, Any]) -> str:
    return json.dumps(payload, indent=2, sort_keys=True)


def emit_result(ctx: DebuggerContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit a successful command result."""
    if ctx.json_output:
        payload: Dict[str, Any] = {"status": "ok"}
        if data is not None:
            payload["result"] = data
        else:
            payload["message"] = message
        print(_json_dump(payload))
    else:
        print(message)


def emit_error(ctx: DebuggerContext, *, message: str, data: Optional[Mapping[str, Any]] = None) -> None:
    """Emit an error message respecting JSON mode."""
    payload: Dict[str, Any] = {"status": "error", "error": message}
    if data:
        payload["details"] = dict(data)
    if ctx.json_output:
        print(_json_dump(payload))
    else:
        print(f"error: {message}")


def render_state(state: Mapping[str, Any]) -> None:
    """Print a machine snapshot as produced by ``Machine.snapshot``."""
    print("  registers:")
    for line in format_registers(state["a"], state["c"], state["d"]):
        print(f"  {line}")
    print(f"  halt={state['halt']} steps={state['steps']} input_pending={state['input_pending']} output={state['output_length']}")


__all__ = [
    "emit_result",
    "emit_error",
    "render_state",
]
