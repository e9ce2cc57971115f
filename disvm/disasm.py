"""Render machine words and state as text for traces and the debugger."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from . import trits
from .opcodes import OPCODE_NAMES


def describe_word(word: int) -> str:
    """Return ``'<char>' MNEMONIC`` for opcodes, ``-`` for plain data."""
    mnemonic = OPCODE_NAMES.get(word)
    if mnemonic is None:
        return "-"
    return f"'{chr(word)}' {mnemonic}"


def disassemble(memory: Sequence[int], start: int = 0, count: int = 16) -> List[Dict[str, object]]:
    """Describe ``count`` words starting at ``start``, wrapping at the end of memory."""
    listing = []
    size = len(memory)
    for offset in range(max(0, count)):
        addr = (start + offset) % size
        word = memory[addr]
        listing.append(
            {
                "addr": addr,
                "word": word,
                "trits": trits.format_trits(word),
                "mnemonic": OPCODE_NAMES.get(word),
                "text": describe_word(word),
            }
        )
    return listing


def format_listing(listing: Sequence[Dict[str, object]], *, marks: Optional[Dict[int, str]] = None) -> List[str]:
    marks = marks or {}
    lines = []
    for entry in listing:
        addr = int(entry["addr"])
        marker = marks.get(addr, "")
        lines.append(f"{marker:>2} {addr:05d}: {int(entry['word']):05d} {entry['trits']}  {entry['text']}")
    return lines


def format_trace(a: int, c: int, d: int, opcode: int, operand: int) -> str:
    """One trace record for the instruction about to execute at ``c``."""
    return (
        f"[TRACE] C={c:05d} D={d:05d} A={a:05d} "
        f"op={describe_word(opcode) if opcode in OPCODE_NAMES else f'{opcode:05d}'} [D]={operand:05d}"
    )


def format_registers(a: int, c: int, d: int) -> List[str]:
    return [f"  {name}: {value:05d} {trits.format_trits(value)}" for name, value in (("A", a), ("C", c), ("D", d))]


__all__ = [
    "describe_word",
    "disassemble",
    "format_listing",
    "format_trace",
    "format_registers",
]
