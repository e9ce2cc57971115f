"""Text <-> byte codecs used to fill the input queue and render the output queue.

Each encoding provides a decoder (text typed by a user -> bytes fed to the
machine) and an encoder (values the machine emitted -> text).  The machine
may emit any word, so encoders view output values as bytes by keeping their
low eight bits.
"""

from __future__ import annotations

import base64
import string
from typing import Callable, Dict, Iterable, Tuple

from .errors import DecodeError

_B64_ALPHABET = frozenset(string.ascii_letters + string.digits + "+/")
_HEX_DIGITS = frozenset(string.hexdigits)


def _strip_space(text: str) -> str:
    return "".join(text.split())


def decode_utf8(text: str) -> bytes:
    return text.encode("utf-8")


def encode_utf8(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def decode_base64(text: str) -> bytes:
    """Decode base64, accepting URL-safe letters, whitespace and missing padding."""
    compact = _strip_space(text.replace("-", "+").replace("_", "/")).rstrip("=")
    for idx, char in enumerate(compact):
        if char not in _B64_ALPHABET:
            raise DecodeError(f"non-base64 character {char!r} at offset {idx}")
    # a lone trailing sextet cannot complete a byte
    if len(compact) % 4 == 1:
        compact = compact[:-1]
    compact += "=" * (-len(compact) % 4)
    return base64.b64decode(compact, validate=True)


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def decode_base16(text: str) -> bytes:
    """Decode hex pairs; case-insensitive, a trailing odd digit is ignored."""
    compact = _strip_space(text)
    for idx, char in enumerate(compact):
        if char not in _HEX_DIGITS:
            raise DecodeError(f"non-hex character {char!r} at offset {idx}")
    if len(compact) % 2:
        compact = compact[:-1]
    return bytes.fromhex(compact)


def encode_base16(data: bytes) -> str:
    return data.hex().upper()


CODECS: Dict[str, Tuple[Callable[[str], bytes], Callable[[bytes], str]]] = {
    "utf-8": (decode_utf8, encode_utf8),
    "base64": (decode_base64, encode_base64),
    "base16": (decode_base16, encode_base16),
}

ENCODINGS: Tuple[str, ...] = tuple(CODECS)


def _lookup(name: str) -> Tuple[Callable[[str], bytes], Callable[[bytes], str]]:
    try:
        return CODECS[name.lower()]
    except (KeyError, AttributeError):
        raise DecodeError(f"no such encoding: {name!r}") from None


def decode_input(name: str, text: str) -> bytes:
    decoder, _ = _lookup(name)
    return decoder(text)


def encode_output(name: str, values: Iterable[int]) -> str:
    _, encoder = _lookup(name)
    return encoder(bytes(int(value) & 0xFF for value in values))


__all__ = [
    "CODECS",
    "ENCODINGS",
    "decode_input",
    "encode_output",
    "decode_base64",
    "encode_base64",
    "decode_base16",
    "encode_base16",
    "decode_utf8",
    "encode_utf8",
]
