"""State inspection commands (regs/mem/output/status)."""

from __future__ import annotations

import argparse
from typing import List

from .base import Command
from ..context import DebuggerContext, NoProgramError
from ..output import emit_error, emit_result, render_state
from ..parser import parse_int
from ...disasm import disassemble, format_listing


class RegistersCommand(Command):
    def __init__(self) -> None:
        super().__init__("regs", "Show registers and machine flags", aliases=("registers", "info"), group="inspection")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            machine = ctx.require_runner().machine
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        state = machine.snapshot()
        emit_result(ctx, message="machine state:", data=state)
        if not ctx.json_output:
            render_state(state)
        return 0


class MemoryCommand(Command):
    def __init__(self) -> None:
        super().__init__("mem", "Inspect memory words", aliases=("memory", "x"), group="inspection")
        self._parser = argparse.ArgumentParser(prog="mem", add_help=False)
        self._parser.add_argument("address", nargs="?", default=None, help="start address (default C)")
        self._parser.add_argument("count", nargs="?", type=int, default=16, help="word count (default 16)")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        try:
            machine = ctx.require_runner().machine
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        if args.address is None:
            start = machine.c
        elif args.address.upper() in ("C", "D"):
            start = machine.c if args.address.upper() == "C" else machine.d
        else:
            try:
                start = parse_int(args.address)
            except ValueError:
                emit_error(ctx, message=f"invalid address: {args.address}")
                return 1
        if not 0 <= start < len(machine.memory):
            emit_error(ctx, message=f"address out of range: {start}")
            return 1
        listing = disassemble(machine.memory, start, args.count)
        emit_result(ctx, message=f"memory @{start:05d}:", data={"start": start, "words": listing})
        if not ctx.json_output:
            marks = {}
            for name, addr in (("C", machine.c), ("D", machine.d)):
                marks[addr] = marks.get(addr, "") + name
            for line in format_listing(listing, marks=marks):
                print(line)
        return 0


class OutputCommand(Command):
    def __init__(self) -> None:
        super().__init__("output", "Show program output (encoded with the output encoding)", aliases=("out",), group="inspection")
        self._parser = argparse.ArgumentParser(prog="output", add_help=False)
        self._parser.add_argument("--clear", action="store_true", help="clear the output queue after printing")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
            machine = ctx.require_runner().machine
        except SystemExit:
            return 1
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        text = ctx.render_output()
        values = list(machine.output_buffer)
        if args.clear:
            machine.drain_output()
        emit_result(ctx, message=text, data={"text": text, "values": values, "encoding": ctx.output_enc})
        return 0


class StatusCommand(Command):
    def __init__(self) -> None:
        super().__init__("status", "Show the loaded program and runner status", group="inspection")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        runner = ctx.runner
        if runner is None:
            emit_result(ctx, message="no program loaded", data={"loaded": False})
            return 0
        machine = runner.machine
        data = {
            "loaded": True,
            "source": str(ctx.source_path or "<inline>"),
            "halt": machine.halt,
            "steps": runner.steps,
            "batches": runner.batches,
            "input_enc": ctx.input_enc,
            "output_enc": ctx.output_enc,
        }
        message = (
            f"{data['source']}: {'halted' if machine.halt else 'runnable'} after {runner.steps} step(s) "
            f"in {runner.batches} batch(es); enc in={ctx.input_enc} out={ctx.output_enc}"
        )
        emit_result(ctx, message=message, data=data)
        return 0
