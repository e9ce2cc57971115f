"""Debugger context: the machine being debugged plus CLI settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from .. import codecs
from ..errors import DisError
from ..host import DEFAULT_BATCH, Runner
from ..machine import Machine

LOGGER = logging.getLogger("dis_dbg.context")


class NoProgramError(DisError):
    """Raised when a command needs a machine but none is loaded."""


@dataclass
class DebuggerContext:
    """Holds shared CLI debugger state."""

    json_output: bool = False
    input_enc: str = "utf-8"
    output_enc: str = "utf-8"
    batch: int = DEFAULT_BATCH
    aliases: Dict[str, str] = field(default_factory=dict)
    source: Optional[str] = field(default=None, repr=False)
    source_path: Optional[Path] = None
    _runner: Optional[Runner] = field(default=None, init=False, repr=False)

    @property
    def machine(self) -> Optional[Machine]:
        return self._runner.machine if self._runner else None

    @property
    def runner(self) -> Optional[Runner]:
        return self._runner

    def require_runner(self) -> Runner:
        if self._runner is None:
            raise NoProgramError("no program loaded (use 'load' or 'source')")
        return self._runner

    def load_source(self, source: str, *, path: Optional[Path] = None) -> Machine:
        """Build a fresh machine; the previous one is kept if loading fails."""
        machine = Machine(source)
        self._runner = Runner(machine, batch=self.batch)
        self.source = source
        self.source_path = path
        LOGGER.info("loaded %d instructions from %s", machine.program_length, path or "<inline>")
        return machine

    def load_file(self, path: Path) -> Machine:
        path = Path(path).expanduser()
        return self.load_source(path.read_text(encoding="utf-8"), path=path)

    def restart(self) -> Machine:
        if self.source is None:
            raise NoProgramError("no program loaded (use 'load' or 'source')")
        return self.load_source(self.source, path=self.source_path)

    def feed_text(self, text: str) -> int:
        """Decode ``text`` with the input encoding and queue it; return the byte count."""
        machine = self.require_runner().machine
        data = codecs.decode_input(self.input_enc, text)
        machine.feed(data)
        return len(data)

    def render_output(self) -> str:
        machine = self.require_runner().machine
        return codecs.encode_output(self.output_enc, machine.output_buffer)

    def resolve_alias(self, name: str) -> str:
        return self.aliases.get(name, name)

    def set_alias(self, alias: str, command: str) -> None:
        if alias == command:
            self.aliases.pop(alias, None)
            return
        self.aliases[alias] = command

    def list_aliases(self) -> Dict[str, str]:
        return dict(self.aliases)
