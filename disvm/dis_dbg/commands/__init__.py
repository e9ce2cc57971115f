"""Command registry for dis-dbg."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .alias import AliasCommand
from .base import Command
from .control import RunCommand, StepCommand
from .exit import ExitCommand
from .help import HelpCommand
from .inspect import MemoryCommand, OutputCommand, RegistersCommand, StatusCommand
from .program import EncodingCommand, InputCommand, LoadCommand, RestartCommand, SourceCommand


class CommandRegistry:
    """Stores the known commands and resolves aliases."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        self._ordered.append(command)
        self._commands[command.name] = command
        for alias in command.aliases:
            self._commands[alias] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def names(self) -> List[str]:
        return sorted(self._commands)

    def list_commands(self) -> Iterable[Command]:
        return self._ordered


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        HelpCommand(),
        LoadCommand(),
        SourceCommand(),
        RestartCommand(),
        InputCommand(),
        EncodingCommand(),
        StepCommand(),
        RunCommand(),
        RegistersCommand(),
        MemoryCommand(),
        OutputCommand(),
        StatusCommand(),
        AliasCommand(),
        ExitCommand(),
    ]
    for command in commands:
        registry.register(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(registry)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
