"""Execution control commands (step/run)."""

from __future__ import annotations

import argparse
from typing import List, Optional

from .base import Command
from ..context import DebuggerContext, NoProgramError
from ..output import emit_error, emit_result
from ...disasm import describe_word
from ...errors import TritRangeError


def _positive(text: str) -> int:
    value = int(text, 0)
    if value < 1:
        raise argparse.ArgumentTypeError("count must be positive")
    return value


def _where(ctx: DebuggerContext) -> str:
    machine = ctx.machine
    if machine.halt:
        return "machine halted"
    return f"next C={machine.c:05d} {describe_word(machine.memory[machine.c])}"


class StepCommand(Command):
    def __init__(self) -> None:
        super().__init__("step", "Execute instructions one cycle at a time", aliases=("s", "next"), group="execution")
        self._parser = argparse.ArgumentParser(prog="step", add_help=False)
        self._parser.add_argument("count", nargs="?", type=_positive, default=1, help="Instruction count (default 1)")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        try:
            runner = ctx.require_runner()
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        try:
            executed = runner.run(args.count)
        except TritRangeError as exc:
            emit_error(ctx, message=f"runtime fault: {exc}")
            return 2
        machine = runner.machine
        emit_result(
            ctx,
            message=f"Stepped {executed} instruction(s); {_where(ctx)}",
            data={"result": "stepped", "executed": executed, "state": machine.snapshot()},
        )
        return 0


class RunCommand(Command):
    def __init__(self) -> None:
        super().__init__("run", "Run until halt (or for a step count)", aliases=("r", "continue", "cont"), group="execution")
        self._parser = argparse.ArgumentParser(prog="run", add_help=False)
        self._parser.add_argument("count", nargs="?", type=_positive, default=None, help="Maximum steps")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        try:
            runner = ctx.require_runner()
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        limit: Optional[int] = args.count
        start = runner.steps
        interrupted = False
        try:
            # one batch per iteration; Ctrl-C can land mid-batch
            while limit is None or runner.steps - start < limit:
                result = runner.run_batch(None if limit is None else limit - (runner.steps - start))
                if result.halted or result.executed == 0:
                    break
        except KeyboardInterrupt:
            interrupted = True
        except TritRangeError as exc:
            emit_error(ctx, message=f"runtime fault: {exc}")
            return 2
        executed = runner.steps - start
        machine = runner.machine
        status = "interrupted" if interrupted else ("halted" if machine.halt else "stopped")
        emit_result(
            ctx,
            message=f"Ran {executed} instruction(s), {status}; {_where(ctx)}",
            data={"result": status, "executed": executed, "state": machine.snapshot()},
        )
        return 0
