"""String helpers: URL coding, time formatting, splitting."""

from __future__ import annotations

import time
from itertools import islice

__all__ = [
    "url_encode",
    "url_decode",
    "time_to_str",
    "str_to_time",
    "split",
    "starts_with",
]

_SAFE = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_.~"
)
_HEX_DIGITS = "0123456789ABCDEF"
_PLUS = ord("+")
_PERCENT = ord("%")
_SPACE = ord(" ")

DEFAULT_TIME_FORMAT = "%Y-%m-%d-%H:%M:%S"
DEFAULT_PARSE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _from_hex(code: int) -> int:
    """Value of one hex digit; letters past F keep counting, anything else is 0."""
    if ord("A") <= code <= ord("Z"):
        return code - ord("A") + 10
    if ord("a") <= code <= ord("z"):
        return code - ord("a") + 10
    if ord("0") <= code <= ord("9"):
        return code - ord("0")
    return 0


def url_encode(text: str) -> str:
    """Percent-encode ``text`` byte by byte, turning spaces into ``+``."""
    parts = []
    for byte in text.encode("utf-8", "surrogateescape"):
        if byte in _SAFE:
            parts.append(chr(byte))
        elif byte == _SPACE:
            parts.append("+")
        else:
            parts.append("%" + _HEX_DIGITS[byte >> 4] + _HEX_DIGITS[byte & 0x0F])
    return "".join(parts)


def url_decode(text: str) -> str:
    """Undo :func:`url_encode`; a ``%`` without two following characters ends the input."""
    out = bytearray()
    stream = iter(text.encode("utf-8", "surrogateescape"))
    for byte in stream:
        if byte == _PLUS:
            out.append(_SPACE)
        elif byte == _PERCENT:
            pair = bytes(islice(stream, 2))
            if len(pair) < 2:
                break
            out.append((_from_hex(pair[0]) * 16 + _from_hex(pair[1])) & 0xFF)
        else:
            out.append(byte)
    return out.decode("utf-8", "surrogateescape")


def time_to_str(ts: float | None = None, fmt: str = DEFAULT_TIME_FORMAT) -> str:
    """Format a Unix timestamp (default: now) in local time."""
    if ts is None:
        ts = time.time()
    return time.strftime(fmt, time.localtime(ts))


def str_to_time(text: str, fmt: str = DEFAULT_PARSE_FORMAT) -> int:
    """Parse local time ``text`` as standard (non-daylight) time into a Unix timestamp.

    Raises ValueError when ``text`` does not match ``fmt``.
    """
    parsed = time.strptime(text, fmt)
    standard = time.struct_time((*parsed[:8], 0))
    return int(time.mktime(standard))


def split(text: str, delim: str) -> list[str]:
    """Split on ``delim``, dropping empty pieces; an empty string yields ``[""]``."""
    if not delim:
        raise ValueError("delimiter must not be empty")
    if not text:
        return [""]
    return [piece for piece in text.split(delim) if piece]


def starts_with(text: str, prefix: str) -> bool:
    """True when ``text`` begins with ``prefix``."""
    return text.startswith(prefix)