"""prompt_toolkit completer for dis-dbg."""

from __future__ import annotations

import shlex
from typing import Iterable, List, Sequence

from prompt_toolkit.completion import Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from .. import codecs
from .commands import CommandRegistry
from .context import DebuggerContext

ADDRESS_WORDS: Sequence[str] = ("C", "D")
PATH_COMMANDS = {"load"}


def _normalise_tokens(text: str) -> List[str]:
    if not text:
        return []
    try:
        tokens = shlex.split(text, posix=True)
        trailing = text[-1].isspace()
    except ValueError:
        tokens = text.strip().split()
        trailing = text.endswith((" ", "\t"))
    if trailing:
        tokens.append("")
    return tokens


class DebuggerCompleter(Completer):
    """Context-aware CLI completer."""

    def __init__(self, ctx: DebuggerContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry
        self._path = PathCompleter(expanduser=True)

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        tokens = _normalise_tokens(document.text_before_cursor)
        if not tokens:
            yield from self._completions(self.registry.names(), "")
            return
        prefix = tokens[-1]
        if len(tokens) == 1:
            yield from self._completions(self.registry.names(), prefix)
            return
        command = self.registry.get(self.ctx.resolve_alias(tokens[0]))
        name = command.name if command else tokens[0]
        if name in PATH_COMMANDS:
            # complete only the path word, not the command in front of it
            yield from self._path.get_completions(Document(prefix, len(prefix)), complete_event)
        elif name == "enc":
            choices = ("in", "out") if len(tokens) == 2 else codecs.ENCODINGS
            yield from self._completions(choices, prefix)
        elif name == "mem" and len(tokens) == 2:
            yield from self._completions(ADDRESS_WORDS, prefix)

    @staticmethod
    def _completions(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
        needle = prefix.lower()
        for entry in sorted(dict.fromkeys(candidates)):
            if entry.lower().startswith(needle):
                yield Completion(entry, start_position=-len(prefix))
