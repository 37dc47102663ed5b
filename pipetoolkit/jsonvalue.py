"""Immutable JSON values with typed accessors, ordering and serialization."""

from __future__ import annotations

import enum
import functools
import math
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

__all__ = ["JsonType", "Json"]

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class JsonType(enum.IntEnum):
    """Kinds of JSON value, in the order used when comparing different kinds."""

    NUL = 0
    NUMBER = 1
    BOOL = 2
    STRING = 3
    ARRAY = 4
    OBJECT = 5


def _dump_string(value: str) -> str:
    parts = ['"']
    for ch in value:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) <= 0x1F:
            parts.append("\\u%04x" % ord(ch))
        else:
            parts.append(ch)
    parts.append('"')
    return "".join(parts)


def _dump_number(value: int | float) -> str:
    if isinstance(value, int):
        return "%d" % value
    if math.isfinite(value):
        return "%.10g" % value
    return "null"


@functools.total_ordering
class Json:
    """A JSON value: null, number, bool, string, array or object.

    Numbers keep whether they were built from an integer or a float, but
    compare by numeric value. Objects keep their keys in sorted order.
    """

    __slots__ = ("_type", "_value")

    def __init__(self, value: Any = None) -> None:
        if isinstance(value, Json):
            self._type, self._value = value._type, value._value
            return
        if value is None:
            self._type, self._value = JsonType.NUL, None
        elif isinstance(value, bool):
            self._type, self._value = JsonType.BOOL, value
        elif isinstance(value, int):
            if _INT_MIN <= value <= _INT_MAX:
                self._type, self._value = JsonType.NUMBER, value
            else:
                self._type, self._value = JsonType.NUMBER, float(value)
        elif isinstance(value, float):
            self._type, self._value = JsonType.NUMBER, value
        elif isinstance(value, str):
            self._type, self._value = JsonType.STRING, value
        elif hasattr(value, "to_json"):
            other = Json(value.to_json())
            self._type, self._value = other._type, other._value
        elif isinstance(value, Mapping):
            items = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"JSON object keys must be str, not {type(key).__name__}")
                items[key] = Json(item)
            self._type = JsonType.OBJECT
            self._value = {key: items[key] for key in sorted(items)}
        elif isinstance(value, Iterable) and not isinstance(value, (bytes, bytearray)):
            self._type, self._value = JsonType.ARRAY, tuple(Json(item) for item in value)
        else:
            raise TypeError(f"cannot make a JSON value from {type(value).__name__}")

    def type(self) -> JsonType:
        """The kind of this value."""
        return self._type

    def is_null(self) -> bool:
        return self._type is JsonType.NUL

    def is_number(self) -> bool:
        return self._type is JsonType.NUMBER

    def is_bool(self) -> bool:
        return self._type is JsonType.BOOL

    def is_string(self) -> bool:
        return self._type is JsonType.STRING

    def is_array(self) -> bool:
        return self._type is JsonType.ARRAY

    def is_object(self) -> bool:
        return self._type is JsonType.OBJECT

    def number_value(self) -> float:
        """The number as a float; 0.0 for anything that is not a number."""
        return float(self._value) if self._type is JsonType.NUMBER else 0.0

    def int_value(self) -> int:
        """The number truncated to an integer; 0 for non-numbers and non-finite values."""
        if self._type is not JsonType.NUMBER:
            return 0
        if isinstance(self._value, float) and not math.isfinite(self._value):
            return 0
        return int(self._value)

    def bool_value(self) -> bool:
        """The boolean; False for anything that is not a bool."""
        return self._value if self._type is JsonType.BOOL else False

    def string_value(self) -> str:
        """The string; empty for anything that is not a string."""
        return self._value if self._type is JsonType.STRING else ""

    def array_items(self) -> tuple[Json, ...]:
        """The elements; empty for anything that is not an array."""
        return self._value if self._type is JsonType.ARRAY else ()

    def object_items(self) -> Mapping[str, Json]:
        """A read-only view of the members; empty for anything that is not an object."""
        return MappingProxyType(self._value if self._type is JsonType.OBJECT else {})

    def __getitem__(self, key: int | str) -> Json:
        """Array element or object member; a null value when there is none."""
        if self._type is JsonType.ARRAY and isinstance(key, int) and not isinstance(key, bool):
            if 0 <= key < len(self._value):
                return self._value[key]
        elif self._type is JsonType.OBJECT and isinstance(key, str):
            found = self._value.get(key)
            if found is not None:
                return found
        return Json()

    def dump(self) -> str:
        """Serialize to JSON text; non-finite numbers become null."""
        kind = self._type
        if kind is JsonType.NUL:
            return "null"
        if kind is JsonType.BOOL:
            return "true" if self._value else "false"
        if kind is JsonType.NUMBER:
            return _dump_number(self._value)
        if kind is JsonType.STRING:
            return _dump_string(self._value)
        if kind is JsonType.ARRAY:
            return "[" + ",".join(item.dump() for item in self._value) + "]"
        members = ",\n".join(
            _dump_string(key) + ": " + item.dump() for key, item in self._value.items()
        )
        return "{\n" + members + "}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Json):
            return NotImplemented
        if self is other:
            return True
        if self._type is not other._type:
            return False
        if self._type is JsonType.NUMBER:
            return self.number_value() == other.number_value()
        return self._value == other._value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Json):
            return NotImplemented
        if self is other:
            return False
        if self._type is not other._type:
            return self._type < other._type
        kind = self._type
        if kind is JsonType.NUL:
            return False
        if kind is JsonType.NUMBER:
            return self.number_value() < other.number_value()
        if kind is JsonType.OBJECT:
            return list(self._value.items()) < list(other._value.items())
        return self._value < other._value

    def __hash__(self) -> int:
        kind = self._type
        if kind is JsonType.NUMBER:
            return hash(self.number_value())
        if kind is JsonType.OBJECT:
            return hash((kind, tuple(self._value.items())))
        return hash((kind, self._value))

    def has_shape(self, shape: Mapping[str, JsonType] | Iterable[tuple[str, JsonType]]) -> bool:
        """True when this is an object whose listed members have the listed types."""
        return self._shape_error(shape) is None

    def _shape_error(self, shape: Any) -> str | None:
        if not self.is_object():
            return "expected JSON object, got " + self.dump()
        pairs = shape.items() if isinstance(shape, Mapping) else shape
        for key, kind in pairs:
            if self[key].type() != kind:
                return "bad type for " + key + " in " + self.dump()
        return None

    def __repr__(self) -> str:
        return f"Json({self.dump()!s})"