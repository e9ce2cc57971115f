"""The Dis machine: program loader, memory, registers and instruction cycle."""

from __future__ import annotations

import logging
from collections import deque
from typing import Any, Deque, Dict, Iterable, Iterator, List, Optional, TextIO

from . import opcodes as op
from . import trits
from .disasm import format_trace
from .errors import ProgramSyntaxError, TritRangeError

LOGGER = logging.getLogger("disvm.machine")

MEMORY_SIZE = trits.END_VALUE

# Characters the loader skips between instructions.
WHITESPACE = frozenset(
    "\t\n\v\f\r \u00a0\u1680\u2028\u2029\u202f\u205f\u3000\ufeff"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
)


def parse_program(source: str) -> List[int]:
    """Translate program text into the list of opcodes it loads into memory.

    Characters in :data:`WHITESPACE` (a byte-order mark among them) are
    skipped and ``( ... )`` comments are dropped; comments do not nest, the
    first ``)`` closes them.  Any other character outside a comment is
    rejected.
    """
    image: List[int] = []
    in_comment = False
    comment_start = (1, 1)
    line, column = 1, 0
    for char in str(source):
        if char == "\n":
            line, column = line + 1, 0
        else:
            column += 1
        if in_comment:
            in_comment = char != ")"
            continue
        if char in WHITESPACE:
            continue
        if char == "(":
            in_comment = True
            comment_start = (line, column)
            continue
        if char not in op.COMMAND_CHARS:
            raise ProgramSyntaxError(f"not a valid instruction: {char!r}", line=line, column=column)
        if len(image) >= MEMORY_SIZE:
            raise ProgramSyntaxError("program too long", line=line, column=column)
        image.append(ord(char))
    if in_comment:
        raise ProgramSyntaxError("unterminated comment", line=comment_start[0], column=comment_start[1])
    return image


class Memory:
    """Fixed-size word store; every write is checked against the trit domain."""

    __slots__ = ("_words",)

    def __init__(self, image: Iterable[int] = ()) -> None:
        words = [trits.DEFAULT.check(word, "memory word") for word in image]
        if len(words) > MEMORY_SIZE:
            raise TritRangeError(f"memory image has {len(words)} words, limit is {MEMORY_SIZE}")
        words.extend([0] * (MEMORY_SIZE - len(words)))
        self._words = words

    def __len__(self) -> int:
        return MEMORY_SIZE

    def __iter__(self) -> Iterator[int]:
        return iter(self._words)

    def _index(self, key) -> int:
        if isinstance(key, bool) or not isinstance(key, int):
            raise TypeError(f"memory address must be an integer, not {type(key).__name__}")
        if key < 0 or key >= MEMORY_SIZE:
            raise IndexError(f"memory address out of range: {key}")
        return key

    def __getitem__(self, key):
        if isinstance(key, slice):
            return self._words[key]
        return self._words[self._index(key)]

    def __setitem__(self, key, value) -> None:
        if isinstance(key, slice):
            raise TypeError("memory does not support slice assignment")
        idx = self._index(key)
        self._words[idx] = trits.DEFAULT.check(value, f"memory[{idx}]")


class Machine:
    """A Dis machine loaded with one program.

    The machine never runs by itself: a host calls :meth:`step` repeatedly
    until it returns ``False`` (the machine halted) or the host loses interest.
    """

    def __init__(self, source: str, *, trace: bool = False, trace_file: Optional[TextIO] = None) -> None:
        image = parse_program(source)
        self.program_length = len(image)
        self.memory = Memory(image)
        self._a = 0
        self._c = 0
        self._d = 0
        self._halt = False
        self._input: Deque[int] = deque()
        self.output_buffer: List[int] = []
        self.steps = 0
        self.trace = trace
        self.trace_out = trace_file
        LOGGER.debug("loaded program with %d instructions", self.program_length)

    # -- registers -----------------------------------------------------

    @property
    def a(self) -> int:
        return self._a

    @a.setter
    def a(self, value: int) -> None:
        self._a = trits.DEFAULT.check(value, "register A")

    @property
    def c(self) -> int:
        return self._c

    @c.setter
    def c(self, value: int) -> None:
        self._c = trits.DEFAULT.check(value, "register C")

    @property
    def d(self) -> int:
        return self._d

    @d.setter
    def d(self, value: int) -> None:
        self._d = trits.DEFAULT.check(value, "register D")

    @property
    def halt(self) -> bool:
        return self._halt

    # -- I/O queues ----------------------------------------------------

    @property
    def input_buffer(self) -> Deque[int]:
        return self._input

    @input_buffer.setter
    def input_buffer(self, values: Iterable[int]) -> None:
        self._input = deque(values)

    def feed(self, values: Iterable[int]) -> None:
        """Append values to the input queue, rejecting anything outside the domain."""
        checked = [trits.DEFAULT.check(value, "input value") for value in values]
        self._input.extend(checked)

    def drain_output(self) -> List[int]:
        out = self.output_buffer
        self.output_buffer = []
        return out

    # -- execution -----------------------------------------------------

    def _log(self, msg: str) -> None:
        if self.trace_out:
            self.trace_out.write(msg + "\n")
            self.trace_out.flush()
        LOGGER.debug(msg)

    def step(self) -> bool:
        """Execute one instruction; return whether the machine can still run."""
        if self._halt:
            return False

        memory = self.memory
        opcode = memory[self._c]
        if self.trace or self.trace_out:
            self._log(format_trace(self._a, self._c, self._d, opcode, memory[self._d]))

        if opcode == op.HALT:
            self._halt = True
            self.steps += 1
            return False
        elif opcode == op.LOAD:
            self.d = memory[self._d]
        elif opcode == op.ROTATE:
            value = trits.rotate_right(memory[self._d])
            self.a = value
            memory[self._d] = value
        elif opcode == op.JUMP:
            self.c = memory[self._d]
        elif opcode == op.OUTPUT:
            if self._a == trits.MAX_VALUE:
                self._halt = True
                self.steps += 1
                return False
            self.output_buffer.append(self._a)
        elif opcode == op.SUBTRACT:
            value = trits.subtract(self._a, memory[self._d])
            self.a = value
            memory[self._d] = value
        elif opcode == op.INPUT:
            self.a = self._input.popleft() if self._input else trits.MAX_VALUE
        # NOP ('_') and any other word fall through without effect.

        self.c = trits.increment(self._c)
        self.d = trits.increment(self._d)
        self.steps += 1
        return True

    def run(self, max_steps: Optional[int] = None) -> int:
        """Step until halt or ``max_steps``; return the number of steps executed."""
        executed = 0
        while not self._halt and (max_steps is None or executed < max_steps):
            self.step()
            executed += 1
        return executed

    def snapshot(self) -> Dict[str, Any]:
        return {
            "a": self._a,
            "c": self._c,
            "d": self._d,
            "halt": self._halt,
            "steps": self.steps,
            "program_length": self.program_length,
            "input_pending": len(self._input),
            "output_length": len(self.output_buffer),
        }


__all__ = [
    "MEMORY_SIZE",
    "WHITESPACE",
    "Memory",
    "Machine",
    "parse_program",
]
