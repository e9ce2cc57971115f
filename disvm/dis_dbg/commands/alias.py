"""alias: define shorthand names for commands."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING, List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_error, emit_result

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry


class AliasCommand(Command):
    def __init__(self) -> None:
        super().__init__("alias", "List, define or remove command aliases")
        self._parser = argparse.ArgumentParser(prog="alias", add_help=False)
        self._parser.add_argument("name", nargs="?", help="alias to define or remove")
        self._parser.add_argument("command", nargs="?", help="command the alias runs (omit to remove)")
        self._parser.add_argument("--clear", action="store_true", help="remove every alias")
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        try:
            args = self._parser.parse_args(argv)
        except SystemExit:
            return 1
        if args.clear:
            ctx.aliases.clear()
        elif args.name and args.command:
            if self._registry is not None and self._registry.get(args.command) is None:
                emit_error(ctx, message=f"Unknown command: {args.command}")
                return 1
            if self._registry is not None and self._registry.get(args.name) is not None:
                emit_error(ctx, message=f"'{args.name}' is already a command")
                return 1
            ctx.set_alias(args.name, args.command)
        elif args.name:
            if ctx.aliases.pop(args.name, None) is None:
                emit_error(ctx, message=f"no alias named '{args.name}'")
                return 1
        aliases = ctx.list_aliases()
        if ctx.json_output:
            emit_result(ctx, message="aliases", data={"aliases": aliases})
        elif not aliases:
            print("No aliases defined")
        else:
            for alias, command in sorted(aliases.items()):
                print(f"  {alias} = {command}")
        return 0
