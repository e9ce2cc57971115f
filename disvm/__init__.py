"""
disvm - an interpreter for the Dis ternary machine.

Use ``python -m disvm`` (or the ``disvm`` script) to run a program in batch
mode and ``python -m disvm.dis_dbg`` (or ``dis-dbg``) for the interactive
stepping debugger.
"""

from __future__ import annotations

from .errors import DecodeError, DisError, ProgramSyntaxError, TritRangeError
from .host import Runner, run_program
from .machine import Machine, parse_program

__all__ = [
    "DecodeError",
    "DisError",
    "Machine",
    "ProgramSyntaxError",
    "Runner",
    "TritRangeError",
    "parse_program",
    "run_program",
]
__version__ = "0.1.0"
