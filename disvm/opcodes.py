"""Shared opcode definitions for the Dis machine.

Keeping the canonical mapping in a single module prevents drift between the
loader, the instruction cycle, the disassembler and the tests.  Opcodes are
the code points of the command characters as they appear in program text.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Tuple

HALT = ord("!")
LOAD = ord("*")
ROTATE = ord(">")
JUMP = ord("^")
NOP = ord("_")
OUTPUT = ord("{")
SUBTRACT = ord("|")
INPUT = ord("}")

# Ordered list so docs and tooling can iterate in a stable order.
OPCODE_LIST: Tuple[Tuple[str, str, int], ...] = (
    ("!", "HALT", HALT),
    ("*", "LOAD", LOAD),
    (">", "ROT", ROTATE),
    ("^", "JMP", JUMP),
    ("_", "NOP", NOP),
    ("{", "OUT", OUTPUT),
    ("|", "SUB", SUBTRACT),
    ("}", "IN", INPUT),
)

COMMAND_CHARS: FrozenSet[str] = frozenset(char for char, _, _ in OPCODE_LIST)
OPCODES: Dict[str, int] = {char: opcode for char, _, opcode in OPCODE_LIST}
OPCODE_NAMES: Dict[int, str] = {opcode: mnemonic for _, mnemonic, opcode in OPCODE_LIST}

__all__ = [
    "HALT",
    "LOAD",
    "ROTATE",
    "JUMP",
    "NOP",
    "OUTPUT",
    "SUBTRACT",
    "INPUT",
    "OPCODE_LIST",
    "COMMAND_CHARS",
    "OPCODES",
    "OPCODE_NAMES",
]
