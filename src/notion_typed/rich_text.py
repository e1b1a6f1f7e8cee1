"""Rich text spans and colours.

A ``RichText`` is an immutable span. The styling helpers return new spans so
they can be chained freely:

    >>> span = RichText.plain("Ended at 5:30 PM").italic().color(Color.GRAY)
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from notion_typed.decoding import (
    join_path,
    optional_field,
    optional_url,
    require_field,
    require_object,
)
from notion_typed.errors import DecodeError
from notion_typed.json_value import JSON


class Color(str, Enum):
    """Colours accepted by Notion for text and block backgrounds."""

    DEFAULT = "default"
    GRAY = "gray"
    BROWN = "brown"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    GRAY_BACKGROUND = "gray_background"
    BROWN_BACKGROUND = "brown_background"
    ORANGE_BACKGROUND = "orange_background"
    YELLOW_BACKGROUND = "yellow_background"
    GREEN_BACKGROUND = "green_background"
    BLUE_BACKGROUND = "blue_background"
    PURPLE_BACKGROUND = "purple_background"
    PINK_BACKGROUND = "pink_background"
    RED_BACKGROUND = "red_background"


def decode_color(obj: dict[str, Any], key: str, path: str) -> Color:
    """Read an optional colour field, defaulting to ``Color.DEFAULT``."""
    name = optional_field(obj, key, str, path, default=Color.DEFAULT.value)
    try:
        return Color(name)
    except ValueError:
        raise DecodeError(f"Unknown color {name!r}", join_path(path, key)) from None


@dataclass(frozen=True)
class Annotations:
    """Styling applied to a rich text span."""

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: Color = Color.DEFAULT

    @property
    def is_default(self) -> bool:
        return self == Annotations()

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "Annotations":
        obj = require_object(obj, path)
        return cls(
            bold=optional_field(obj, "bold", bool, path, default=False),
            italic=optional_field(obj, "italic", bool, path, default=False),
            strikethrough=optional_field(obj, "strikethrough", bool, path, default=False),
            underline=optional_field(obj, "underline", bool, path, default=False),
            code=optional_field(obj, "code", bool, path, default=False),
            color=decode_color(obj, "color", path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "bold": self.bold,
            "italic": self.italic,
            "strikethrough": self.strikethrough,
            "underline": self.underline,
            "code": self.code,
            "color": self.color.value,
        }


class RichTextType(str, Enum):
    TEXT = "text"
    MENTION = "mention"
    EQUATION = "equation"


@dataclass(frozen=True)
class RichText:
    """One span of rich text.

    Attributes:
        type: ``text``, ``mention`` or ``equation``.
        content: Text content for text spans, the expression for equations,
            empty for mentions.
        link: Hyperlink target of a text span.
        mention: Raw mention payload (user, page, date, ...) for mention spans.
        annotations: Bold/italic/... and colour.
        href: Server-computed link target, when any.
        plain_text: Server-computed plain text. None for spans built locally.
    """

    type: RichTextType = RichTextType.TEXT
    content: str = ""
    link: str | None = None
    mention: JSON = field(default=JSON.null)
    annotations: Annotations = field(default_factory=Annotations)
    href: str | None = None
    plain_text: str | None = None

    @classmethod
    def plain(cls, content: str) -> "RichText":
        """An unstyled text span."""
        return cls(type=RichTextType.TEXT, content=content)

    @classmethod
    def equation(cls, expression: str) -> "RichText":
        return cls(type=RichTextType.EQUATION, content=expression)

    @property
    def text(self) -> str:
        """Plain text of the span, falling back to the local content."""
        return self.plain_text if self.plain_text is not None else self.content

    # -------------------------------------------------------------------------
    # Styling (each returns a new span)
    # -------------------------------------------------------------------------

    def _annotate(self, **changes: Any) -> "RichText":
        return replace(self, annotations=replace(self.annotations, **changes))

    def bold(self) -> "RichText":
        return self._annotate(bold=True)

    def italic(self) -> "RichText":
        return self._annotate(italic=True)

    def strikethrough(self) -> "RichText":
        return self._annotate(strikethrough=True)

    def underline(self) -> "RichText":
        return self._annotate(underline=True)

    def code(self) -> "RichText":
        return self._annotate(code=True)

    def color(self, color: Color | str) -> "RichText":
        return self._annotate(color=Color(color))

    def with_link(self, url: str | None) -> "RichText":
        """Return a text span pointing at ``url`` (None removes the link)."""
        if self.type is not RichTextType.TEXT:
            raise ValueError("Only text spans can carry a link")
        return replace(self, link=url or None)

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "RichText":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            span_type = RichTextType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown rich text type {type_name!r}", join_path(path, "type")) from None

        payload_path = join_path(path, type_name)
        payload = require_field(obj, type_name, dict, path)
        content = ""
        link = None
        mention = JSON.null
        if span_type is RichTextType.TEXT:
            content = require_field(payload, "content", str, payload_path)
            link_obj = optional_field(payload, "link", dict, payload_path)
            if link_obj is not None:
                link = optional_url(link_obj, "url", join_path(payload_path, "link"))
        elif span_type is RichTextType.EQUATION:
            content = require_field(payload, "expression", str, payload_path)
        else:
            mention = JSON(payload)

        annotations_obj = obj.get("annotations")
        annotations = (
            Annotations()
            if annotations_obj is None
            else Annotations.from_json(annotations_obj, join_path(path, "annotations"))
        )
        return cls(
            type=span_type,
            content=content,
            link=link,
            mention=mention,
            annotations=annotations,
            href=optional_url(obj, "href", path),
            plain_text=optional_field(obj, "plain_text", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        if self.type is RichTextType.TEXT:
            payload: Any = {"content": self.content}
            if self.link:
                payload["link"] = {"url": self.link}
        elif self.type is RichTextType.EQUATION:
            payload = {"expression": self.content}
        else:
            payload = self.mention.to_python()
        result: dict[str, Any] = {"type": self.type.value, self.type.value: payload}
        if not self.annotations.is_default:
            result["annotations"] = self.annotations.to_json()
        if self.plain_text is not None:
            result["plain_text"] = self.plain_text
        if self.href is not None:
            result["href"] = self.href
        return result


def text(content: str) -> RichText:
    """Shorthand for ``RichText.plain``."""
    return RichText.plain(content)


def decode_rich_text_list(value: Any, path: str) -> tuple[RichText, ...]:
    """Decode a JSON array of rich text spans."""
    if not isinstance(value, list):
        raise DecodeError("Expected array of rich text", path)
    return tuple(RichText.from_json(item, join_path(path, i)) for i, item in enumerate(value))


def encode_rich_text_list(spans: tuple[RichText, ...]) -> list[dict[str, Any]]:
    return [span.to_json() for span in spans]


def as_rich_text(value: "str | RichText | list[RichText] | tuple[RichText, ...]") -> tuple[RichText, ...]:
    """Normalize builder input (plain string, one span, or several) to spans."""
    if isinstance(value, str):
        return (RichText.plain(value),)
    if isinstance(value, RichText):
        return (value,)
    return tuple(value)
