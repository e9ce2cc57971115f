"""Fixed-width ternary arithmetic for the Dis machine.

Every machine word is a ``DIGITS``-digit number in base ``BASE`` (ten trits by
default, so words range over ``0..59048``).  The helpers here are pure and are
closed over that domain: any result they return is itself a valid word, and
arguments outside the domain raise :class:`~disvm.errors.TritRangeError`
instead of producing an out-of-range number.
"""

from __future__ import annotations

from typing import List, Sequence

from .errors import TritRangeError

DEFAULT_BASE = 3
DEFAULT_DIGITS = 10


class TritMath:
    """Arithmetic over ``digits``-digit unsigned numbers in ``base``."""

    __slots__ = ("base", "digits", "min_value", "max_value", "end_value", "_top")

    def __init__(self, base: int = DEFAULT_BASE, digits: int = DEFAULT_DIGITS) -> None:
        if isinstance(base, bool) or not isinstance(base, int) or base < 2:
            raise ValueError(f"base must be an integer >= 2 (got {base!r})")
        if isinstance(digits, bool) or not isinstance(digits, int) or digits < 1:
            raise ValueError(f"digits must be an integer >= 1 (got {digits!r})")
        self.base = base
        self.digits = digits
        self.min_value = 0
        self.end_value = base ** digits
        self.max_value = self.end_value - 1
        # weight of the most significant digit
        self._top = self.end_value // base

    def __repr__(self) -> str:
        return f"TritMath(base={self.base}, digits={self.digits})"

    def is_in_domain(self, x) -> bool:
        if isinstance(x, bool) or not isinstance(x, int):
            return False
        return self.min_value <= x <= self.max_value

    def check(self, x, what: str = "value") -> int:
        """Return ``x`` unchanged, or raise if it is not a valid word."""
        if not self.is_in_domain(x):
            raise TritRangeError(f"{what} is not a {self.digits}-digit base-{self.base} value: {x!r}")
        return x

    def increment(self, x: int, y: int = 1) -> int:
        self.check(x)
        if isinstance(y, bool) or not isinstance(y, int):
            raise TritRangeError(f"increment step must be an integer: {y!r}")
        return (x + y) % self.end_value

    def rotate_right(self, x: int, y: int = 1) -> int:
        """Rotate the digits of ``x`` right ``y`` times.

        The least significant digit moves to the most significant position.
        ``y`` is taken modulo ``digits``; negative counts rotate left.
        """
        self.check(x)
        if isinstance(y, bool) or not isinstance(y, int):
            raise TritRangeError(f"rotation count must be an integer: {y!r}")
        for _ in range(y % self.digits):
            x = x // self.base + (x % self.base) * self._top
        return x

    def subtract(self, x: int, y: int) -> int:
        """Digit-wise ``x - y`` modulo ``base`` with no borrow between digits."""
        self.check(x)
        self.check(y)
        result = 0
        place = 1
        for _ in range(self.digits):
            result += (self.base + x % self.base - y % self.base) % self.base * place
            x //= self.base
            y //= self.base
            place *= self.base
        return result

    def subtract_by_digits(self, x: int, y: int) -> int:
        """Same as :meth:`subtract`, computed from the full digit vectors."""
        pairs = zip(self.to_digits(x), self.to_digits(y))
        return self.from_digits([(self.base + dx - dy) % self.base for dx, dy in pairs])

    def to_digits(self, x: int) -> List[int]:
        """Return the digits of ``x``, least significant first."""
        self.check(x)
        return [x // self.base ** i % self.base for i in range(self.digits)]

    def from_digits(self, digits: Sequence[int]) -> int:
        if len(digits) != self.digits:
            raise TritRangeError(f"expected {self.digits} digits, got {len(digits)}")
        value = 0
        for idx, digit in enumerate(digits):
            if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit < self.base:
                raise TritRangeError(f"digit {idx} out of range for base {self.base}: {digit!r}")
            value += digit * self.base ** idx
        return value

    def format_trits(self, x: int) -> str:
        """Render ``x`` as a fixed-width digit string, most significant first."""
        return "".join(str(d) for d in reversed(self.to_digits(x)))


DEFAULT = TritMath()

BASE = DEFAULT.base
DIGITS = DEFAULT.digits
MIN_VALUE = DEFAULT.min_value
MAX_VALUE = DEFAULT.max_value
END_VALUE = DEFAULT.end_value

is_in_domain = DEFAULT.is_in_domain
increment = DEFAULT.increment
rotate_right = DEFAULT.rotate_right
subtract = DEFAULT.subtract
format_trits = DEFAULT.format_trits

__all__ = [
    "TritMath",
    "DEFAULT",
    "BASE",
    "DIGITS",
    "MIN_VALUE",
    "MAX_VALUE",
    "END_VALUE",
    "is_in_domain",
    "increment",
    "rotate_right",
    "subtract",
    "format_trits",
]
