"""Base64 encoding and a lenient base64 decoder."""

from __future__ import annotations

import base64

__all__ = ["base64_size", "encode_base64", "decode_base64"]

_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
_DECODE = {ch: value for value, ch in enumerate(_ALPHABET)}
_MAX_INPUT = 0xFFFFFFFF // 4


def base64_size(n: int) -> int:
    """Buffer size needed to encode ``n`` bytes, terminator included."""
    return (n + 2) // 3 * 4 + 1


def encode_base64(data: bytes | str) -> str:
    """Encode ``data`` (text is taken as UTF-8) as padded base64."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    if len(data) >= _MAX_INPUT:
        raise OverflowError("input too large to encode")
    return base64.b64encode(data).decode("ascii")


def decode_base64(text: str) -> bytes:
    """Decode base64 ``text``; stops at ``=`` or NUL, padding is optional.

    Raises ValueError on a character outside the base64 alphabet.
    """
    out = bytearray()
    bits = 0
    for position, ch in enumerate(text):
        if ch in ("=", "\0"):
            break
        value = _DECODE.get(ch)
        if value is None:
            raise ValueError(f"invalid base64 character {ch!r} at {position}")
        bits = ((bits << 6) + value) & 0xFFFFFF
        phase = position & 3
        if phase:
            out.append((bits >> (6 - 2 * phase)) & 0xFF)
    return bytes(out)