"""Parsing JSON text into :class:`~pipetoolkit.jsonvalue.Json` values."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .jsonvalue import Json

__all__ = [
    "ParseStrategy",
    "JsonParseError",
    "MultiParseResult",
    "parse",
    "parse_multi",
]

MAX_DEPTH = 200
_INT_DIGITS = 9
_WHITESPACE = frozenset(" \r\n\t")
_HEX = frozenset("0123456789abcdefABCDEF")
_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    '"': '"',
    "\\": "\\",
    "/": "/",
}


class ParseStrategy(enum.Enum):
    """Whether C-style comments are accepted between tokens."""

    STANDARD = 0
    COMMENTS = 1


class JsonParseError(ValueError):
    """Raised when JSON text is malformed."""

    def __init__(self, message: str, position: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.position = position


@dataclass
class MultiParseResult:
    """Values parsed from concatenated JSON text.

    ``stop_pos`` is the offset just past the last value (and trailing
    whitespace or comments) parsed successfully; ``error`` holds the message
    of the failure that ended parsing, or None when all input was consumed.
    """

    values: list[Json] = field(default_factory=list)
    stop_pos: int = 0
    error: str | None = None


def _esc(ch: str) -> str:
    """Describe a character for an error message."""
    code = ord(ch)
    if 0x20 <= code <= 0x7F:
        return f"'{ch}' ({code})"
    return f"({code})"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


class _Parser:
    def __init__(self, text: str, strategy: ParseStrategy) -> None:
        self.text = text
        self.pos = 0
        self.strategy = strategy

    def _peek(self, offset: int = 0) -> str:
        index = self.pos + offset
        return self.text[index] if index < len(self.text) else "\0"

    def fail(self, message: str) -> JsonParseError:
        return JsonParseError(message, self.pos)

    def consume_whitespace(self) -> None:
        while self._peek() in _WHITESPACE:
            self.pos += 1

    def consume_comment(self) -> bool:
        if self._peek() != "/":
            return False
        size = len(self.text)
        self.pos += 1
        if self.pos == size:
            raise self.fail("unexpected end of input after start of comment")
        ch = self.text[self.pos]
        if ch == "/":
            end = self.text.find("\n", self.pos + 1)
            self.pos = size if end == -1 else end
            return True
        if ch == "*":
            self.pos += 1
            if self.pos > size - 2:
                raise self.fail("unexpected end of input inside multi-line comment")
            while not (self._peek() == "*" and self._peek(1) == "/"):
                self.pos += 1
                if self.pos > size - 2:
                    raise self.fail("unexpected end of input inside multi-line comment")
            self.pos += 2
            return True
        raise self.fail("malformed comment")

    def consume_garbage(self) -> None:
        self.consume_whitespace()
        if self.strategy is ParseStrategy.COMMENTS:
            while self.consume_comment():
                self.consume_whitespace()

    def next_token(self) -> str:
        self.consume_garbage()
        if self.pos == len(self.text):
            raise self.fail("unexpected end of input")
        ch = self.text[self.pos]
        self.pos += 1
        return ch

    def parse_string(self) -> str:
        out: list[str] = []
        pending = -1  # escaped code point not yet emitted, kept for surrogate pairing

        def flush() -> None:
            nonlocal pending
            if pending >= 0:
                out.append(chr(pending))
            pending = -1

        size = len(self.text)
        while True:
            if self.pos == size:
                raise self.fail("unexpected end of input in string")
            ch = self.text[self.pos]
            self.pos += 1

            if ch == '"':
                flush()
                return "".join(out)
            if ord(ch) <= 0x1F:
                raise self.fail("unescaped " + _esc(ch) + " in string")
            if ch != "\\":
                flush()
                out.append(ch)
                continue

            if self.pos == size:
                raise self.fail("unexpected end of input in string")
            ch = self.text[self.pos]
            self.pos += 1

            if ch == "u":
                digits = self.text[self.pos : self.pos + 4]
                if len(digits) < 4 or not all(d in _HEX for d in digits):
                    raise self.fail("bad \\u escape: " + digits)
                codepoint = int(digits, 16)
                if 0xD800 <= pending <= 0xDBFF and 0xDC00 <= codepoint <= 0xDFFF:
                    out.append(chr((((pending - 0xD800) << 10) | (codepoint - 0xDC00)) + 0x10000))
                    pending = -1
                else:
                    flush()
                    pending = codepoint
                self.pos += 4
                continue

            flush()
            replacement = _SIMPLE_ESCAPES.get(ch)
            if replacement is None:
                raise self.fail("invalid escape character " + _esc(ch))
            out.append(replacement)

    def parse_number(self) -> Json:
        start = self.pos
        if self._peek() == "-":
            self.pos += 1

        if self._peek() == "0":
            self.pos += 1
            if _is_digit(self._peek()):
                raise self.fail("leading 0s not permitted in numbers")
        elif "1" <= self._peek() <= "9":
            self.pos += 1
            while _is_digit(self._peek()):
                self.pos += 1
        else:
            raise self.fail("invalid " + _esc(self._peek()) + " in number")

        if self._peek() not in ".eE" and self.pos - start <= _INT_DIGITS:
            return Json(int(self.text[start : self.pos]))

        if self._peek() == ".":
            self.pos += 1
            if not _is_digit(self._peek()):
                raise self.fail("at least one digit required in fractional part")
            while _is_digit(self._peek()):
                self.pos += 1

        if self._peek() in ("e", "E"):
            self.pos += 1
            if self._peek() in ("+", "-"):
                self.pos += 1
            if not _is_digit(self._peek()):
                raise self.fail("at least one digit required in exponent")
            while _is_digit(self._peek()):
                self.pos += 1

        return Json(float(self.text[start : self.pos]))

    def expect(self, expected: str, result: Json) -> Json:
        self.pos -= 1
        if self.text.startswith(expected, self.pos):
            self.pos += len(expected)
            return result
        got = self.text[self.pos : self.pos + len(expected)]
        raise self.fail("parse error: expected " + expected + ", got " + got)

    def parse_json(self, depth: int) -> Json:
        if depth > MAX_DEPTH:
            raise self.fail("exceeded maximum nesting depth")

        ch = self.next_token()
        if ch == "-" or _is_digit(ch):
            self.pos -= 1
            return self.parse_number()
        if ch == "t":
            return self.expect("true", Json(True))
        if ch == "f":
            return self.expect("false", Json(False))
        if ch == "n":
            return self.expect("null", Json())
        if ch == '"':
            return Json(self.parse_string())
        if ch == "{":
            return self._parse_object(depth)
        if ch == "[":
            return self._parse_array(depth)
        raise self.fail("expected value, got " + _esc(ch))

    def _parse_object(self, depth: int) -> Json:
        members: dict[str, Json] = {}
        ch = self.next_token()
        if ch == "}":
            return Json(members)
        while True:
            if ch != '"':
                raise self.fail("expected '\"' in object, got " + _esc(ch))
            key = self.parse_string()
            ch = self.next_token()
            if ch != ":":
                raise self.fail("expected ':' in object, got " + _esc(ch))
            members[key] = self.parse_json(depth + 1)
            ch = self.next_token()
            if ch == "}":
                return Json(members)
            if ch != ",":
                raise self.fail("expected ',' in object, got " + _esc(ch))
            ch = self.next_token()

    def _parse_array(self, depth: int) -> Json:
        items: list[Json] = []
        ch = self.next_token()
        if ch == "]":
            return Json(items)
        while True:
            self.pos -= 1
            items.append(self.parse_json(depth + 1))
            ch = self.next_token()
            if ch == "]":
                return Json(items)
            if ch != ",":
                raise self.fail("expected ',' in list, got " + _esc(ch))
            self.next_token()


def _as_text(text: str | bytes | None) -> str:
    if text is None:
        raise JsonParseError("null input")
    if isinstance(text, (bytes, bytearray)):
        return bytes(text).decode("utf-8")
    return text


def parse(text: str | bytes, strategy: ParseStrategy = ParseStrategy.STANDARD) -> Json:
    """Parse a single JSON value; anything but whitespace (or comments) after it is an error.

    Raises JsonParseError on malformed input.
    """
    parser = _Parser(_as_text(text), strategy)
    result = parser.parse_json(0)
    parser.consume_garbage()
    if parser.pos != len(parser.text):
        raise parser.fail("unexpected trailing " + _esc(parser.text[parser.pos]))
    return result


def parse_multi(
    text: str | bytes, strategy: ParseStrategy = ParseStrategy.STANDARD
) -> MultiParseResult:
    """Parse JSON values that are concatenated or separated by whitespace.

    Parsing stops at the first error, which is reported in the result
    together with the values read before it.
    """
    parser = _Parser(_as_text(text), strategy)
    result = MultiParseResult()
    while parser.pos != len(parser.text):
        try:
            value = parser.parse_json(0)
            parser.consume_garbage()
        except JsonParseError as exc:
            result.error = exc.message
            break
        result.values.append(value)
        result.stop_pos = parser.pos
    return result