"""Immutable representation of arbitrary JSON.

``JSON`` wraps any JSON value (string, integer, float, boolean, array, object
or null) and gives it value semantics: it can't be mutated, compares
structurally and can be hashed. Lookups never raise; a missing key or index
gives ``JSON.null`` so that lookups can be chained through structures of
unknown shape:

    >>> block = JSON.decode(b'{"paragraph": {"rich_text": [{"plain_text": "Hi"}]}}')
    >>> block["paragraph", "rich_text", 0, "plain_text"].string_value
    'Hi'
    >>> block["heading_1", "rich_text", 0].is_null
    True

Nested updates are pure as well: ``with_value`` returns a new value and leaves
the receiver untouched.
"""

import json
import math
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from notion_typed.errors import DecodeError

PathStep = str | int


class JSONKind(str, Enum):
    """The variant a ``JSON`` value holds."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"


_NUMERIC = (JSONKind.INTEGER, JSONKind.FLOAT)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


class JSON:
    """An immutable JSON value."""

    __slots__ = ("_kind", "_value")

    null: "JSON"

    def __init__(self, value: Any = None):
        if isinstance(value, JSON):
            kind, value = value._kind, value._value
        elif value is None:
            kind = JSONKind.NULL
        elif isinstance(value, bool):
            kind = JSONKind.BOOLEAN
        elif isinstance(value, int):
            kind = JSONKind.INTEGER
        elif isinstance(value, float):
            if not math.isfinite(value):
                raise ValueError(f"{value} can't be represented in JSON")
            kind = JSONKind.FLOAT
        elif isinstance(value, str):
            kind = JSONKind.STRING
        elif isinstance(value, Mapping):
            kind = JSONKind.OBJECT
            items = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"JSON object keys must be strings, got {type(key).__name__}")
                items[key] = JSON(item)
            value = MappingProxyType(items)
        elif isinstance(value, (list, tuple)):
            kind = JSONKind.ARRAY
            value = tuple(JSON(item) for item in value)
        else:
            raise TypeError(f"Unsupported JSON type: {type(value).__name__}")
        object.__setattr__(self, "_kind", kind)
        object.__setattr__(self, "_value", value)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("JSON values are immutable")

    # -------------------------------------------------------------------------
    # Codec
    # -------------------------------------------------------------------------

    @classmethod
    def decode(cls, data: bytes | str) -> "JSON":
        """Parse JSON text.

        Raises:
            DecodeError: If the input is not well-formed JSON, holds a number
                too large for a float, or is nested too deeply.
        """
        try:
            if isinstance(data, (bytes, bytearray)):
                data = data.decode("utf-8")
            return cls(json.loads(data, parse_constant=_reject_constant))
        except RecursionError as e:
            raise DecodeError("JSON nested too deeply") from e
        except (UnicodeDecodeError, ValueError, TypeError) as e:
            raise DecodeError(f"Invalid JSON: {e}") from e

    def encode(self) -> bytes:
        """Serialize to compact UTF-8 JSON."""
        return json.dumps(self.to_python(), ensure_ascii=False, separators=(",", ":")).encode(
            "utf-8"
        )

    def to_python(self) -> Any:
        """Return a fresh plain Python structure (dicts, lists, scalars)."""
        if self._kind is JSONKind.OBJECT:
            return {key: item.to_python() for key, item in self._value.items()}
        if self._kind is JSONKind.ARRAY:
            return [item.to_python() for item in self._value]
        return self._value

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    @property
    def kind(self) -> JSONKind:
        return self._kind

    @property
    def is_null(self) -> bool:
        return self._kind is JSONKind.NULL

    @property
    def value(self) -> str | int | float | bool | None:
        """The scalar held by this value, or None for arrays, objects and null."""
        if self._kind in (JSONKind.ARRAY, JSONKind.OBJECT):
            return None
        return self._value

    @property
    def string_value(self) -> str:
        """Scalars rendered as text; empty string for anything else."""
        if self._kind is JSONKind.STRING:
            return self._value
        if self._kind is JSONKind.BOOLEAN:
            return "true" if self._value else "false"
        if self._kind in _NUMERIC:
            return str(self._value)
        return ""

    @property
    def bool_value(self) -> bool:
        return self._kind is JSONKind.BOOLEAN and self._value

    @property
    def array_value(self) -> tuple["JSON", ...]:
        return self._value if self._kind is JSONKind.ARRAY else ()

    @property
    def object_value(self) -> Mapping[str, "JSON"]:
        return self._value if self._kind is JSONKind.OBJECT else MappingProxyType({})

    # -------------------------------------------------------------------------
    # Safe navigation
    # -------------------------------------------------------------------------

    def get(self, *path: PathStep) -> "JSON":
        """Follow a path of object keys and array indexes.

        Returns ``JSON.null`` as soon as a step doesn't apply; never raises.
        """
        current = self
        for step in path:
            current = current._step(step)
            if current.is_null:
                return current
        return current

    def _step(self, step: PathStep) -> "JSON":
        if isinstance(step, bool):
            return JSON.null
        if isinstance(step, str) and self._kind is JSONKind.OBJECT:
            return self._value.get(step, JSON.null)
        if isinstance(step, int) and self._kind is JSONKind.ARRAY:
            if 0 <= step < len(self._value):
                return self._value[step]
        return JSON.null

    def __getitem__(self, key: PathStep | tuple[PathStep, ...]) -> "JSON":
        if isinstance(key, tuple):
            return self.get(*key)
        return self.get(key)

    def __contains__(self, key: str) -> bool:
        return self._kind is JSONKind.OBJECT and key in self._value

    # -------------------------------------------------------------------------
    # Pure transformations
    # -------------------------------------------------------------------------

    def merge(self, other: Any) -> "JSON":
        """Merge ``other`` into this value and return the result.

        - if either side is null, the other side wins;
        - objects merge recursively key by key, ``other`` winning conflicts;
        - arrays are concatenated;
        - anything else: ``other`` wins.
        """
        other = JSON(other)
        if self.is_null:
            return other
        if other.is_null:
            return self
        if self._kind is JSONKind.OBJECT and other._kind is JSONKind.OBJECT:
            merged = dict(self._value)
            for key, item in other._value.items():
                merged[key] = merged[key].merge(item) if key in merged else item
            return JSON(merged)
        if self._kind is JSONKind.ARRAY and other._kind is JSONKind.ARRAY:
            return JSON(self._value + other._value)
        return other

    def with_value(self, path: Iterable[PathStep], value: Any) -> "JSON":
        """Return a copy with ``value`` stored at ``path``.

        Missing object keys are created. A key step applied to a non-object
        replaces it with an object. An index equal to the array length appends;
        an index step on null starts a new array.

        Raises:
            IndexError: For an index beyond the end of an array.
            TypeError: For an index step on a non-array, non-null value.
        """
        steps = tuple(path)
        if not steps:
            return JSON(value)
        head, rest = steps[0], steps[1:]
        if isinstance(head, str):
            items = dict(self._value) if self._kind is JSONKind.OBJECT else {}
            items[head] = items.get(head, JSON.null).with_value(rest, value)
            return JSON(items)
        if isinstance(head, bool) or not isinstance(head, int):
            raise TypeError(f"Path steps must be str or int, got {type(head).__name__}")
        if self._kind is JSONKind.NULL:
            elements: list[JSON] = []
        elif self._kind is JSONKind.ARRAY:
            elements = list(self._value)
        else:
            raise TypeError(f"Can't index into a JSON {self._kind.value}")
        if 0 <= head < len(elements):
            elements[head] = elements[head].with_value(rest, value)
        elif head == len(elements):
            elements.append(JSON.null.with_value(rest, value))
        else:
            raise IndexError(f"Index {head} out of range for array of length {len(elements)}")
        return JSON(elements)

    # -------------------------------------------------------------------------
    # Value semantics
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSON):
            return NotImplemented
        if self._kind in _NUMERIC and other._kind in _NUMERIC:
            return self._value == other._value
        if self._kind is not other._kind:
            return False
        if self._kind is JSONKind.OBJECT:
            return dict(self._value) == dict(other._value)
        return self._value == other._value

    def __hash__(self) -> int:
        if self._kind is JSONKind.OBJECT:
            return hash((JSONKind.OBJECT, frozenset(self._value.items())))
        if self._kind in _NUMERIC:
            return hash(self._value)
        return hash((self._kind, self._value))

    def __repr__(self) -> str:
        return f"JSON({self.to_python()!r})"


JSON.null = JSON(None)


def merge(a: Any, b: Any) -> JSON:
    """Merge two JSON values; see ``JSON.merge``."""
    return JSON(a).merge(b)
