"""Command base class for dis-dbg."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from ..context import DebuggerContext


@dataclass
class Command:
    """One debugger command.  ``group`` decides where ``help`` lists it."""

    name: str
    description: str
    aliases: Sequence[str] = field(default_factory=tuple)
    group: str = "session"

    def run(self, ctx: DebuggerContext, argv: List[str]) -> int:
        raise NotImplementedError(f"{type(self).__name__} does not implement run()")

    def usage(self) -> str:
        parser = getattr(self, "_parser", None)
        if parser is None:
            return self.name
        return parser.format_usage().replace("usage:", "", 1).strip()

    def summary(self) -> str:
        names = "/".join((self.name, *self.aliases))
        return f"  {names:<22} {self.description}"
