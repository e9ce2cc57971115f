"""dis-dbg CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .. import codecs
from ..errors import DecodeError, ProgramSyntaxError
from .commands import CommandRegistry, build_registry
from .context import DebuggerContext
from .history import HistoryStore
from .repl import DebuggerREPL

LOG = logging.getLogger("dis_dbg.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Dis machine stepping debugger")
    parser.add_argument("program", nargs="?", type=Path, help="Dis source file to load")
    parser.add_argument("--input", help="Input text queued after loading")
    parser.add_argument("--input-enc", choices=codecs.ENCODINGS, default="utf-8", help="Input encoding")
    parser.add_argument("--output-enc", choices=codecs.ENCODINGS, default="utf-8", help="Output encoding")
    parser.add_argument("--json", action="store_true", help="Emit JSON output when supported")
    parser.add_argument("--log-level", default=os.environ.get("DISVM_LOG", "INFO"), help="Logging level (default INFO)")
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        help="Execute a command non-interactively (repeatable; quote the command string)",
    )
    parser.add_argument(
        "--history",
        type=Path,
        default=Path.home() / ".dis-dbg-history",
        help="Path to command history file",
    )
    return parser


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    ctx = DebuggerContext(
        json_output=args.json,
        input_enc=args.input_enc,
        output_enc=args.output_enc,
    )
    if args.program:
        try:
            ctx.load_file(args.program)
            if args.input:
                ctx.feed_text(args.input)
        except (OSError, ProgramSyntaxError, DecodeError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    registry = build_registry()
    if args.command:
        return _run_commands(ctx, registry, args.command)
    repl = DebuggerREPL(ctx, registry, history_store=HistoryStore(str(args.history)))
    try:
        return repl.run()
    except SystemExit as exc:
        return int(exc.code or 0)
    except KeyboardInterrupt:
        print()
        return 0


def _run_commands(ctx: DebuggerContext, registry: CommandRegistry, lines: List[str]) -> int:
    repl = DebuggerREPL(ctx, registry, interactive=False)
    status = 0
    for line in lines:
        try:
            status = repl.dispatch(line)
        except SystemExit as exc:
            return int(exc.code or 0)
        if status:
            LOG.debug("command %r exited with %d", line, status)
            break
    return status


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
