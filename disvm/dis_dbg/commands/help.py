"""help: list commands by group, or show one command's usage."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List

from .base import Command
from ..context import DebuggerContext
from ..output import emit_error, emit_result

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry

GROUPS = ("program", "execution", "inspection", "session")


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "List commands, or show usage for one", aliases=("?",))
        self._registry: CommandRegistry | None = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        registry = self._registry
        if registry is None:
            emit_error(ctx, message="help is not bound to a command registry")
            return 1
        if argv:
            command = registry.get(ctx.resolve_alias(argv[0]))
            if command is None:
                emit_error(ctx, message=f"Unknown command: {argv[0]}")
                return 1
            emit_result(
                ctx,
                message=f"usage: {command.usage()}\n{command.summary().strip()}",
                data={"name": command.name, "aliases": list(command.aliases), "usage": command.usage()},
            )
            return 0
        grouped: Dict[str, List[Command]] = {group: [] for group in GROUPS}
        for command in registry.list_commands():
            grouped.setdefault(command.group, []).append(command)
        if ctx.json_output:
            emit_result(ctx, message="commands", data={group: [c.name for c in cmds] for group, cmds in grouped.items() if cmds})
            return 0
        for group, commands in grouped.items():
            if not commands:
                continue
            print(f"{group}:")
            for command in commands:
                print(command.summary())
        print("Type 'help <command>' for its arguments.")
        return 0
