#!/usr/bin/env python3
"""Batch host for the Dis machine.

The machine is a synchronous stepper; :class:`Runner` drives it in bounded
batches so an interactive host can regain control between batches, and
:func:`main` is the ``disvm`` command line built on top of it.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from . import codecs
from .errors import DecodeError, DisError, ProgramSyntaxError, TritRangeError
from .machine import Machine

LOGGER = logging.getLogger("disvm.host")

DEFAULT_BATCH = 10000
DEFAULT_OUTPUT_LIMIT = 200000


@dataclass
class BatchResult:
    executed: int
    halted: bool
    paused: bool


class Runner:
    """Runs a machine ``batch`` steps at a time, with pause/resume."""

    def __init__(self, machine: Machine, *, batch: int = DEFAULT_BATCH) -> None:
        if batch < 1:
            raise ValueError(f"batch must be positive (got {batch})")
        self.machine = machine
        self.batch = batch
        self.paused = False
        self.steps = 0
        self.batches = 0

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def run_batch(self, limit: Optional[int] = None) -> BatchResult:
        machine = self.machine
        if self.paused or machine.halt:
            return BatchResult(executed=0, halted=machine.halt, paused=self.paused)
        budget = self.batch if limit is None else max(0, min(self.batch, limit))
        start = machine.steps
        try:
            machine.run(budget)
        except TritRangeError:
            LOGGER.error("runtime fault at C=%d D=%d after %d steps", machine.c, machine.d, machine.steps)
            raise
        finally:
            # a fault or Ctrl-C still leaves a partial batch behind
            executed = machine.steps - start
            self.steps += executed
            self.batches += 1
        LOGGER.debug("batch %d executed %d steps (halt=%s)", self.batches, executed, machine.halt)
        return BatchResult(executed=executed, halted=machine.halt, paused=self.paused)

    def run(self, max_steps: Optional[int] = None) -> int:
        """Run batches until halt, pause or ``max_steps``; return steps executed."""
        total = 0
        while max_steps is None or total < max_steps:
            remaining = None if max_steps is None else max_steps - total
            result = self.run_batch(remaining)
            total += result.executed
            if result.halted or result.paused or result.executed == 0:
                break
        return total


def run_program(
    source: str,
    input_bytes: bytes = b"",
    *,
    max_steps: Optional[int] = None,
    batch: int = DEFAULT_BATCH,
) -> Machine:
    """Load ``source``, feed ``input_bytes`` and run until halt or ``max_steps``."""
    machine = Machine(source)
    machine.input_buffer = list(input_bytes)
    Runner(machine, batch=batch).run(max_steps)
    return machine


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return int(raw, 0)
    except ValueError:
        LOGGER.warning("ignoring non-numeric %s=%r", name, raw)
        return default


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Dis ternary machine interpreter")
    ap.add_argument("program", help="Dis source file ('-' reads standard input)")
    source = ap.add_mutually_exclusive_group()
    source.add_argument("--input", help="program input text")
    source.add_argument("--input-file", type=Path, help="read program input text from a file")
    ap.add_argument("--input-enc", choices=codecs.ENCODINGS, default="utf-8", help="encoding of the input text")
    ap.add_argument("--output-enc", choices=codecs.ENCODINGS, default="utf-8", help="encoding used to print output")
    ap.add_argument("--max-steps", type=int, default=None, help="safety cap on executed steps")
    ap.add_argument("--batch", type=int, default=None, help="steps per scheduling batch (default $DISVM_BATCH or 10000)")
    ap.add_argument(
        "--output-limit",
        type=int,
        default=DEFAULT_OUTPUT_LIMIT,
        help="truncate rendered output to this many characters (0 disables)",
    )
    ap.add_argument("--trace", action="store_true", help="print every executed instruction to stderr")
    ap.add_argument("--log-level", default=os.environ.get("DISVM_LOG", "WARNING"), help="Logging level (default WARNING)")
    ap.add_argument("-v", "--verbose", action="store_true", help="print final machine state to stderr")
    return ap


def _read_source(program: str) -> str:
    if program == "-":
        return sys.stdin.read()
    return Path(program).read_text(encoding="utf-8")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.log_level)
    batch = args.batch if args.batch is not None else _env_int("DISVM_BATCH", DEFAULT_BATCH)

    try:
        source = _read_source(args.program)
        input_text = args.input_file.read_text(encoding="utf-8") if args.input_file else (args.input or "")
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        machine = Machine(source, trace=args.trace, trace_file=sys.stderr if args.trace else None)
        machine.input_buffer = list(codecs.decode_input(args.input_enc, input_text))
    except (ProgramSyntaxError, DecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    runner = Runner(machine, batch=max(1, batch))
    try:
        runner.run(args.max_steps)
    except DisError as exc:
        print(f"error: runtime fault: {exc}", file=sys.stderr)
        return 2

    text = codecs.encode_output(args.output_enc, machine.output_buffer)
    if args.output_limit and len(text) > args.output_limit:
        LOGGER.warning("output too long; truncated to %d characters", args.output_limit)
        text = text[: args.output_limit]
    sys.stdout.write(text)
    sys.stdout.flush()

    if not machine.halt:
        print(f"[DIS] Max steps {args.max_steps} reached; stopping", file=sys.stderr)
    if args.verbose:
        state = machine.snapshot()
        print(
            f"[DIS] {'Halted' if state['halt'] else 'Stopped'} after {state['steps']} steps "
            f"A={state['a']} C={state['c']} D={state['d']}",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
