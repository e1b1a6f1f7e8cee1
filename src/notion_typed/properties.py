"""Typed page property values.

Page properties follow the same tagged pattern as blocks:
``{"id": "...", "type": "number", "number": 42}``. ``PageProperty`` holds the
property id and exactly one ``PropertyValue`` whose class matches ``type``.
Unknown property types decode to ``UnsupportedValue`` instead of failing.

Some payloads are nullable on the wire (an empty number, select, date, url,
email or phone cell comes back as ``null``); the payload key itself must
still be present.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from notion_typed.common import FileObject, PartialUser
from notion_typed.decoding import (
    expect,
    format_timestamp,
    join_path,
    optional_field,
    parse_timestamp,
    require_field,
    require_key,
    require_object,
)
from notion_typed.errors import DecodeError
from notion_typed.json_value import JSON
from notion_typed.rich_text import (
    Color,
    RichText,
    as_rich_text,
    decode_color,
    decode_rich_text_list,
    encode_rich_text_list,
)
from notion_typed.users import User


class PropertyType(str, Enum):
    TITLE = "title"
    RICH_TEXT = "rich_text"
    NUMBER = "number"
    SELECT = "select"
    MULTI_SELECT = "multi_select"
    DATE = "date"
    FORMULA = "formula"
    RELATION = "relation"
    ROLLUP = "rollup"
    PEOPLE = "people"
    FILES = "files"
    CHECKBOX = "checkbox"
    URL = "url"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    CREATED_TIME = "created_time"
    CREATED_BY = "created_by"
    LAST_EDITED_TIME = "last_edited_time"
    LAST_EDITED_BY = "last_edited_by"
    UNSUPPORTED = "unsupported"


# =============================================================================
# SUPPORTING TYPES
# =============================================================================


@dataclass(frozen=True)
class SelectOption:
    name: str
    id: str | None = None
    color: Color = Color.DEFAULT

    @classmethod
    def from_json(cls, obj: Any, path: str) -> "SelectOption":
        obj = require_object(obj, path)
        return cls(
            name=require_field(obj, "name", str, path),
            id=optional_field(obj, "id", str, path),
            color=decode_color(obj, "color", path),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "color": self.color.value}
        if self.id is not None:
            result["id"] = self.id
        return result


@dataclass(frozen=True)
class DateRange:
    """A date or date range. ``start``/``end`` are ISO dates or date-times as sent."""

    start: str
    end: str | None = None
    time_zone: str | None = None

    @classmethod
    def from_json(cls, obj: Any, path: str) -> "DateRange":
        obj = require_object(obj, path)
        return cls(
            start=require_field(obj, "start", str, path),
            end=optional_field(obj, "end", str, path),
            time_zone=optional_field(obj, "time_zone", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "time_zone": self.time_zone}


def _optional_date_range(value: Any, path: str) -> DateRange | None:
    return None if value is None else DateRange.from_json(value, path)


def _decode_user_ref(value: Any, path: str) -> User | PartialUser:
    obj = require_object(value, path)
    # Property payloads sometimes carry only {"object": "user", "id": ...}
    if "type" in obj:
        return User.from_json(obj, path)
    return PartialUser.from_json(obj, path)


class FormulaType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


@dataclass(frozen=True)
class Formula:
    """Computed formula result; ``value`` type follows ``type``."""

    type: FormulaType
    value: str | int | float | bool | DateRange | None = None

    @classmethod
    def from_json(cls, obj: Any, path: str) -> "Formula":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            formula_type = FormulaType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown formula type {type_name!r}", join_path(path, "type")) from None
        raw = require_key(obj, type_name, path)
        value_path = join_path(path, type_name)
        if raw is None:
            value = None
        elif formula_type is FormulaType.STRING:
            value = expect(raw, str, value_path)
        elif formula_type is FormulaType.NUMBER:
            value = expect(raw, float, value_path)
        elif formula_type is FormulaType.BOOLEAN:
            value = expect(raw, bool, value_path)
        else:
            value = DateRange.from_json(raw, value_path)
        return cls(formula_type, value)

    def to_json(self) -> dict[str, Any]:
        value = self.value.to_json() if isinstance(self.value, DateRange) else self.value
        return {"type": self.type.value, self.type.value: value}


class RollupType(str, Enum):
    NUMBER = "number"
    DATE = "date"
    ARRAY = "array"
    INCOMPLETE = "incomplete"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Rollup:
    """Rollup result. Array items are the raw property values of related pages.

    ``incomplete``, ``unsupported`` and rollup types we don't know keep their
    payload as raw JSON; ``name`` holds the wire type of unknown ones.
    """

    type: RollupType
    function: str
    value: int | float | DateRange | tuple[JSON, ...] | JSON | None = None
    name: str | None = None

    @property
    def type_name(self) -> str:
        return self.name or self.type.value

    @classmethod
    def from_json(cls, obj: Any, path: str) -> "Rollup":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        function = optional_field(obj, "function", str, path, default="")
        try:
            rollup_type = RollupType(type_name)
        except ValueError:
            return cls(RollupType.UNSUPPORTED, function, JSON(obj.get(type_name)), name=type_name)
        if rollup_type in (RollupType.INCOMPLETE, RollupType.UNSUPPORTED):
            return cls(rollup_type, function, JSON(obj.get(type_name)))

        raw = require_key(obj, type_name, path)
        value_path = join_path(path, type_name)
        if raw is None:
            value = None
        elif rollup_type is RollupType.NUMBER:
            value = expect(raw, float, value_path)
        elif rollup_type is RollupType.DATE:
            value = DateRange.from_json(raw, value_path)
        else:
            value = tuple(JSON(item) for item in expect(raw, list, value_path))
        return cls(rollup_type, function, value)

    def to_json(self) -> dict[str, Any]:
        if isinstance(self.value, DateRange):
            value: Any = self.value.to_json()
        elif isinstance(self.value, tuple):
            value = [item.to_python() for item in self.value]
        elif isinstance(self.value, JSON):
            value = self.value.to_python()
        else:
            value = self.value
        return {"type": self.type_name, self.type_name: value, "function": self.function}


# =============================================================================
# PROPERTY VALUES
# =============================================================================


class PropertyValue:
    """Base class of the per-type property payloads."""

    property_type: ClassVar[PropertyType]

    @property
    def type_name(self) -> str:
        return self.property_type.value

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "PropertyValue":
        raise NotImplementedError

    def to_json(self) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class TitleValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.TITLE

    rich_text: tuple[RichText, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.rich_text)

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "TitleValue":
        return cls(decode_rich_text_list(payload, path))

    def to_json(self) -> Any:
        return encode_rich_text_list(self.rich_text)


@dataclass(frozen=True)
class RichTextValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.RICH_TEXT

    rich_text: tuple[RichText, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.rich_text)

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "RichTextValue":
        return cls(decode_rich_text_list(payload, path))

    def to_json(self) -> Any:
        return encode_rich_text_list(self.rich_text)


@dataclass(frozen=True)
class NumberValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.NUMBER

    number: int | float | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "NumberValue":
        return cls(None if payload is None else expect(payload, float, path))

    def to_json(self) -> Any:
        return self.number


@dataclass(frozen=True)
class SelectValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.SELECT

    option: SelectOption | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "SelectValue":
        return cls(None if payload is None else SelectOption.from_json(payload, path))

    def to_json(self) -> Any:
        return None if self.option is None else self.option.to_json()


@dataclass(frozen=True)
class MultiSelectValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.MULTI_SELECT

    options: tuple[SelectOption, ...] = ()

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "MultiSelectValue":
        items = expect(payload, list, path)
        return cls(tuple(SelectOption.from_json(item, join_path(path, i)) for i, item in enumerate(items)))

    def to_json(self) -> Any:
        return [option.to_json() for option in self.options]


@dataclass(frozen=True)
class DateValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.DATE

    date: DateRange | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "DateValue":
        return cls(_optional_date_range(payload, path))

    def to_json(self) -> Any:
        return None if self.date is None else self.date.to_json()


@dataclass(frozen=True)
class FormulaValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.FORMULA

    formula: Formula

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "FormulaValue":
        return cls(Formula.from_json(payload, path))

    def to_json(self) -> Any:
        return self.formula.to_json()


@dataclass(frozen=True)
class RelationValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.RELATION

    page_ids: tuple[str, ...] = ()

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "RelationValue":
        items = expect(payload, list, path)
        return cls(
            tuple(
                require_field(require_object(item, join_path(path, i)), "id", str, join_path(path, i))
                for i, item in enumerate(items)
            )
        )

    def to_json(self) -> Any:
        return [{"id": page_id} for page_id in self.page_ids]


@dataclass(frozen=True)
class RollupValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.ROLLUP

    rollup: Rollup

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "RollupValue":
        return cls(Rollup.from_json(payload, path))

    def to_json(self) -> Any:
        return self.rollup.to_json()


@dataclass(frozen=True)
class PeopleValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.PEOPLE

    people: tuple[User | PartialUser, ...] = ()

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "PeopleValue":
        items = expect(payload, list, path)
        return cls(tuple(_decode_user_ref(item, join_path(path, i)) for i, item in enumerate(items)))

    def to_json(self) -> Any:
        return [person.to_json() for person in self.people]


@dataclass(frozen=True)
class FilesValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.FILES

    files: tuple[FileObject, ...] = ()

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "FilesValue":
        items = expect(payload, list, path)
        return cls(tuple(FileObject.from_json(item, join_path(path, i)) for i, item in enumerate(items)))

    def to_json(self) -> Any:
        return [file.to_json() for file in self.files]


@dataclass(frozen=True)
class CheckboxValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.CHECKBOX

    checked: bool = False

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "CheckboxValue":
        return cls(expect(payload, bool, path))

    def to_json(self) -> Any:
        return self.checked


@dataclass(frozen=True)
class UrlValue(PropertyValue):
    """URL cell. An empty string on the wire means no URL."""

    property_type: ClassVar[PropertyType] = PropertyType.URL

    url: str | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "UrlValue":
        return cls(None if payload is None else expect(payload, str, path) or None)

    def to_json(self) -> Any:
        return self.url


@dataclass(frozen=True)
class EmailValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.EMAIL

    email: str | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "EmailValue":
        return cls(None if payload is None else expect(payload, str, path))

    def to_json(self) -> Any:
        return self.email


@dataclass(frozen=True)
class PhoneNumberValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.PHONE_NUMBER

    phone_number: str | None = None

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "PhoneNumberValue":
        return cls(None if payload is None else expect(payload, str, path))

    def to_json(self) -> Any:
        return self.phone_number


@dataclass(frozen=True)
class CreatedTimeValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.CREATED_TIME

    time: datetime

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "CreatedTimeValue":
        return cls(parse_timestamp(expect(payload, str, path), path))

    def to_json(self) -> Any:
        return format_timestamp(self.time)


@dataclass(frozen=True)
class LastEditedTimeValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.LAST_EDITED_TIME

    time: datetime

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "LastEditedTimeValue":
        return cls(parse_timestamp(expect(payload, str, path), path))

    def to_json(self) -> Any:
        return format_timestamp(self.time)


@dataclass(frozen=True)
class CreatedByValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.CREATED_BY

    user: User | PartialUser

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "CreatedByValue":
        return cls(_decode_user_ref(payload, path))

    def to_json(self) -> Any:
        return self.user.to_json()


@dataclass(frozen=True)
class LastEditedByValue(PropertyValue):
    property_type: ClassVar[PropertyType] = PropertyType.LAST_EDITED_BY

    user: User | PartialUser

    @classmethod
    def from_json(cls, payload: Any, path: str) -> "LastEditedByValue":
        return cls(_decode_user_ref(payload, path))

    def to_json(self) -> Any:
        return self.user.to_json()


@dataclass(frozen=True)
class UnsupportedValue(PropertyValue):
    """A property type this library doesn't model. The payload is kept verbatim."""

    property_type: ClassVar[PropertyType] = PropertyType.UNSUPPORTED

    name: str = PropertyType.UNSUPPORTED.value
    payload: JSON = field(default=JSON.null)

    @property
    def type_name(self) -> str:
        return self.name

    def to_json(self) -> Any:
        return self.payload.to_python()


_VALUE_TYPES: dict[PropertyType, type[PropertyValue]] = {
    value.property_type: value
    for value in (
        TitleValue,
        RichTextValue,
        NumberValue,
        SelectValue,
        MultiSelectValue,
        DateValue,
        FormulaValue,
        RelationValue,
        RollupValue,
        PeopleValue,
        FilesValue,
        CheckboxValue,
        UrlValue,
        EmailValue,
        PhoneNumberValue,
        CreatedTimeValue,
        CreatedByValue,
        LastEditedTimeValue,
        LastEditedByValue,
    )
}


# =============================================================================
# PAGE PROPERTY
# =============================================================================


@dataclass(frozen=True)
class PageProperty:
    """A property of a page: its id and one typed value.

    ``id`` is None for properties built locally for create/update requests.
    """

    value: PropertyValue
    id: str | None = None

    @property
    def type(self) -> PropertyType:
        return self.value.property_type

    @property
    def type_name(self) -> str:
        return self.value.type_name

    @property
    def plain_text(self) -> str | None:
        """Plain text of title and rich text properties, None for other types."""
        if isinstance(self.value, (TitleValue, RichTextValue)):
            return self.value.plain_text
        return None

    # -------------------------------------------------------------------------
    # Builders
    # -------------------------------------------------------------------------

    @classmethod
    def title(cls, text: "str | RichText | list[RichText]") -> "PageProperty":
        return cls(TitleValue(as_rich_text(text)))

    @classmethod
    def rich_text(cls, text: "str | RichText | list[RichText]") -> "PageProperty":
        return cls(RichTextValue(as_rich_text(text)))

    @classmethod
    def number(cls, number: int | float | None) -> "PageProperty":
        return cls(NumberValue(number))

    @classmethod
    def checkbox(cls, checked: bool) -> "PageProperty":
        return cls(CheckboxValue(checked))

    @classmethod
    def url(cls, url: str | None) -> "PageProperty":
        return cls(UrlValue(url or None))

    @classmethod
    def select(cls, name: str | None) -> "PageProperty":
        return cls(SelectValue(None if name is None else SelectOption(name)))

    @classmethod
    def multi_select(cls, names: list[str]) -> "PageProperty":
        return cls(MultiSelectValue(tuple(SelectOption(name) for name in names)))

    @classmethod
    def date(cls, start: str, end: str | None = None) -> "PageProperty":
        return cls(DateValue(DateRange(start, end)))

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "PageProperty":
        """Decode a property value object.

        Raises:
            DecodeError: If the payload for a known type is missing or malformed.
        """
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            property_type = PropertyType(type_name)
        except ValueError:
            property_type = PropertyType.UNSUPPORTED

        extra = [
            other.value
            for other in _VALUE_TYPES
            if other is not property_type and other.value in obj
        ]
        if extra:
            raise DecodeError(
                f"Property of type {type_name!r} also carries payload {extra}", path or "<root>"
            )

        if property_type is PropertyType.UNSUPPORTED:
            value: PropertyValue = UnsupportedValue(name=type_name, payload=JSON(obj.get(type_name)))
        else:
            payload = require_key(obj, type_name, path)
            value = _VALUE_TYPES[property_type].from_json(payload, join_path(path, type_name))

        return cls(value=value, id=optional_field(obj, "id", str, path))

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.id is not None:
            result["id"] = self.id
        result["type"] = self.type_name
        result[self.type_name] = self.value.to_json()
        return result

    def to_request(self) -> dict[str, Any]:
        """Encode for page create/update: only the typed payload."""
        return {self.type_name: self.value.to_json()}
