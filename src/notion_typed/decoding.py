"""Field readers shared by the wire decoders.

Every decoder in this package works on the plain ``dict``/``list`` structure
produced by ``JSON.to_python()`` and reports failures as ``DecodeError`` with
the JSON path of the offending field.
"""

import re
from datetime import datetime, timezone
from typing import Any

from notion_typed.errors import DecodeError

# 2024-04-26T13:00:00.000Z, 2024-04-26T13:00:00+02:00, 2024-04-26T13:00:00.123456Z
TIMESTAMP_PATTERN = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{1,6})?(Z|[+-][0-9]{2}:[0-9]{2})\Z"
)

_TYPE_NAMES = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def join_path(path: str, key: str | int) -> str:
    """Append an object key or array index to a JSON path."""
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


def _matches(value: Any, kind: type) -> bool:
    # bool is an int subclass; JSON keeps them apart
    if kind in (int, float):
        if isinstance(value, bool):
            return False
        if kind is float:
            return isinstance(value, (int, float))
    return isinstance(value, kind)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    for kind, name in _TYPE_NAMES.items():
        if type(value) is kind:
            return name
    return type(value).__name__


def expect(value: Any, kind: type, path: str) -> Any:
    """Check that a value has the given JSON type and return it."""
    if not _matches(value, kind):
        raise DecodeError(
            f"Expected {_TYPE_NAMES.get(kind, kind.__name__)}, got {_type_name(value)}", path
        )
    return value


def require_object(value: Any, path: str = "") -> dict[str, Any]:
    """Check that a value is a JSON object."""
    return expect(value, dict, path)


def require_field(obj: dict[str, Any], key: str, kind: type, path: str = "") -> Any:
    """Read a field that must be present, non-null and of the given type."""
    field_path = join_path(path, key)
    if key not in obj:
        raise DecodeError("Missing required field", field_path)
    value = obj[key]
    if value is None:
        raise DecodeError("Required field is null", field_path)
    return expect(value, kind, field_path)


def optional_field(
    obj: dict[str, Any], key: str, kind: type, path: str = "", default: Any = None
) -> Any:
    """Read a field that may be missing or null."""
    value = obj.get(key)
    if value is None:
        return default
    return expect(value, kind, join_path(path, key))


def require_key(obj: dict[str, Any], key: str, path: str = "") -> Any:
    """Read a field that must be present but may be null."""
    if key not in obj:
        raise DecodeError("Missing required field", join_path(path, key))
    return obj[key]


def require_list(obj: dict[str, Any], key: str, path: str = "") -> list[Any]:
    """Read a field that must be a JSON array."""
    return require_field(obj, key, list, path)


# =============================================================================
# TIMESTAMPS
# =============================================================================


def parse_timestamp(text: str, path: str = "") -> datetime:
    """Parse a Notion timestamp such as ``2024-04-26T13:00:00.000Z``.

    Only timezone-qualified ISO-8601 date-times are accepted. Date-only
    strings and naive times are rejected.

    Raises:
        DecodeError: If the string does not match the timestamp format.
    """
    if not isinstance(text, str) or not TIMESTAMP_PATTERN.match(text):
        raise DecodeError(f"Invalid timestamp {text!r}", path)
    fmt = "%Y-%m-%dT%H:%M:%S.%f%z" if "." in text else "%Y-%m-%dT%H:%M:%S%z"
    try:
        return datetime.strptime(text, fmt)
    except ValueError as e:
        raise DecodeError(f"Invalid timestamp {text!r}: {e}", path) from e


def format_timestamp(value: datetime) -> str:
    """Format a timezone-aware datetime the way Notion does (UTC, ``Z`` suffix).

    Milliseconds are written unless the value carries sub-millisecond
    precision, in which case all six fractional digits are kept.
    """
    if value.tzinfo is None:
        raise ValueError("Notion timestamps must be timezone-aware")
    utc = value.astimezone(timezone.utc)
    base = utc.strftime("%Y-%m-%dT%H:%M:%S")
    if utc.microsecond % 1000:
        return f"{base}.{utc.microsecond:06d}Z"
    return f"{base}.{utc.microsecond // 1000:03d}Z"


def optional_timestamp(obj: dict[str, Any], key: str, path: str = "") -> datetime | None:
    """Read an optional timestamp field; present values must be well-formed."""
    text = optional_field(obj, key, str, path)
    if text is None:
        return None
    return parse_timestamp(text, join_path(path, key))


def require_timestamp(obj: dict[str, Any], key: str, path: str = "") -> datetime:
    """Read a required timestamp field."""
    return parse_timestamp(require_field(obj, key, str, path), join_path(path, key))


# =============================================================================
# URLS
# =============================================================================


def optional_url(obj: dict[str, Any], key: str, path: str = "") -> str | None:
    """Read a URL field. Missing, null and empty-string values are all absent."""
    url = optional_field(obj, key, str, path)
    return url or None
