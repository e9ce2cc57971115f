"""exit: leave the debugger, reporting where the machine stopped."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_result


class ExitCommand(Command):
    def __init__(self) -> None:
        super().__init__("exit", "Leave the debugger (optional exit status)", aliases=("quit", "q"))
        self._parser = argparse.ArgumentParser(prog="exit", add_help=False)
        self._parser.add_argument("code", nargs="?", type=int, default=0, help="process exit status")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        machine = ctx.machine
        if machine is not None:
            state = "halted" if machine.halt else "not halted"
            emit_result(
                ctx,
                message=f"Leaving after {machine.steps} step(s); machine {state}, {len(machine.output_buffer)} output value(s)",
                data={"exit": args.code, "state": machine.snapshot()},
            )
        raise SystemExit(args.code)
