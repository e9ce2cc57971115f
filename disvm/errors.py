"""Exception hierarchy shared by the Dis machine, codecs and hosts."""

from __future__ import annotations

from typing import Optional


class DisError(Exception):
    """Base class for every error raised by disvm."""


class ProgramSyntaxError(DisError):
    """Raised when program text cannot be loaded into memory."""

    def __init__(self, message: str, *, line: Optional[int] = None, column: Optional[int] = None) -> None:
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)
        self.line = line
        self.column = column


class TritRangeError(DisError, ValueError):
    """Raised for a value outside the ten-trit domain."""


class DecodeError(DisError, ValueError):
    """Raised when codec input is malformed or the encoding is unknown."""


__all__ = [
    "DisError",
    "ProgramSyntaxError",
    "TritRangeError",
    "DecodeError",
]
