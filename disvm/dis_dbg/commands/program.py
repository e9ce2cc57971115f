"""Program and I/O setup commands (load/source/restart/input/enc)."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from .base import Command
from ..context import DebuggerContext, NoProgramError
from ..output import emit_error, emit_result
from ... import codecs
from ...errors import DecodeError, ProgramSyntaxError, TritRangeError


def _loaded(ctx: DebuggerContext, label: str) -> int:
    machine = ctx.machine
    emit_result(
        ctx,
        message=f"Loaded {machine.program_length} instruction(s) from {label}",
        data={"result": "loaded", "source": label, "program_length": machine.program_length},
    )
    return 0


class LoadCommand(Command):
    def __init__(self) -> None:
        super().__init__("load", "Load a Dis program from a file", group="program")
        self._parser = argparse.ArgumentParser(prog="load", add_help=False)
        self._parser.add_argument("path", type=Path, help="program file")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        try:
            ctx.load_file(args.path)
        except OSError as exc:
            emit_error(ctx, message=f"load failed: {exc}")
            return 2
        except ProgramSyntaxError as exc:
            emit_error(ctx, message=f"syntax error: {exc}")
            return 1
        return _loaded(ctx, str(args.path))


class SourceCommand(Command):
    def __init__(self) -> None:
        super().__init__("source", "Load program text given on the command line", aliases=("src",), group="program")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        if not argv:
            emit_error(ctx, message="source requires program text")
            return 1
        try:
            ctx.load_source(" ".join(argv))
        except ProgramSyntaxError as exc:
            emit_error(ctx, message=f"syntax error: {exc}")
            return 1
        return _loaded(ctx, "<inline>")


class RestartCommand(Command):
    def __init__(self) -> None:
        super().__init__("restart", "Reload the current program into a fresh machine", aliases=("reset",), group="program")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            ctx.restart()
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        return _loaded(ctx, str(ctx.source_path or "<inline>"))


class InputCommand(Command):
    def __init__(self) -> None:
        super().__init__("input", "Queue input text (decoded with the input encoding)", aliases=("in",), group="program")

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        text = " ".join(argv)
        try:
            count = ctx.feed_text(text)
        except NoProgramError as exc:
            emit_error(ctx, message=str(exc))
            return 1
        except (DecodeError, TritRangeError) as exc:
            emit_error(ctx, message=f"input rejected: {exc}")
            return 1
        pending = len(ctx.machine.input_buffer)
        emit_result(
            ctx,
            message=f"Queued {count} byte(s); {pending} pending",
            data={"result": "queued", "count": count, "pending": pending},
        )
        return 0


class EncodingCommand(Command):
    def __init__(self) -> None:
        super().__init__("enc", "Show or set the input/output encodings", aliases=("encoding",), group="program")
        self._parser = argparse.ArgumentParser(prog="enc", add_help=False)
        self._parser.add_argument("direction", nargs="?", choices=("in", "out"))
        self._parser.add_argument("name", nargs="?", choices=codecs.ENCODINGS)

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        if args.direction and args.name:
            if args.direction == "in":
                ctx.input_enc = args.name
            else:
                ctx.output_enc = args.name
        elif args.direction:
            emit_error(ctx, message=f"enc {args.direction} requires one of: {', '.join(codecs.ENCODINGS)}")
            return 1
        emit_result(
            ctx,
            message=f"input={ctx.input_enc} output={ctx.output_enc}",
            data={"input": ctx.input_enc, "output": ctx.output_enc},
        )
        return 0
