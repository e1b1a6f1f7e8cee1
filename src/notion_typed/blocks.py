"""Typed Notion blocks.

A block's shape depends on its ``type`` discriminator: a paragraph carries
``{"paragraph": {"rich_text": [...]}}``, an image carries ``{"image": {...}}``
and so on. ``Block`` keeps the shared metadata (id, parent, timestamps, ...)
and exactly one ``BlockContent`` payload whose class matches the
discriminator.

Decoding reads ``type`` first and dispatches to one payload decoder. Types we
don't know decode to ``Unsupported`` so new server-side block types don't break
existing callers. Encoding writes ``type`` and exactly one payload field.

Children are never embedded in fetched blocks; use the client's
``block_children`` to page through them. The ``children`` field on payloads
is only for write requests (nested lists, toggles, table rows).
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from notion_typed.common import FileObject, Icon, Parent, PartialUser, optional_partial_user
from notion_typed.decoding import (
    format_timestamp,
    join_path,
    optional_field,
    optional_timestamp,
    optional_url,
    require_field,
    require_list,
    require_object,
)
from notion_typed.errors import DecodeError
from notion_typed.json_value import JSON
from notion_typed.rich_text import (
    Color,
    RichText,
    decode_color,
    decode_rich_text_list,
    encode_rich_text_list,
)

logger = logging.getLogger(__name__)


class BlockType(str, Enum):
    """Block kinds with a typed payload, plus the ``unsupported`` catch-all."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    CODE = "code"
    CALLOUT = "callout"
    QUOTE = "quote"
    DIVIDER = "divider"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    BOOKMARK = "bookmark"
    CHILD_PAGE = "child_page"
    TABLE = "table"
    TABLE_ROW = "table_row"
    UNSUPPORTED = "unsupported"


def _decode_children(payload: dict[str, Any], path: str) -> tuple["Block", ...]:
    children = payload.get("children")
    if children is None:
        return ()
    children_path = join_path(path, "children")
    if not isinstance(children, list):
        raise DecodeError("Expected array of blocks", children_path)
    return tuple(Block.from_json(child, join_path(children_path, i)) for i, child in enumerate(children))


def _decode_caption(payload: dict[str, Any], path: str) -> tuple[RichText, ...]:
    caption = payload.get("caption")
    if caption is None:
        return ()
    return decode_rich_text_list(caption, join_path(path, "caption"))


# =============================================================================
# PAYLOADS
# =============================================================================


class BlockContent:
    """Base class of the per-type block payloads."""

    block_type: ClassVar[BlockType]

    @property
    def type_name(self) -> str:
        return self.block_type.value

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "BlockContent":
        raise NotImplementedError

    def to_json(self) -> dict[str, Any]:
        raise NotImplementedError


@dataclass(frozen=True)
class TextBlockContent(BlockContent):
    """Payload shared by blocks made of a rich text run and a colour."""

    rich_text: tuple[RichText, ...] = ()
    color: Color = Color.DEFAULT
    children: tuple["Block", ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.rich_text)

    @classmethod
    def _fields(cls, payload: dict[str, Any], path: str) -> dict[str, Any]:
        return {
            "rich_text": decode_rich_text_list(
                require_field(payload, "rich_text", list, path), join_path(path, "rich_text")
            ),
            "color": decode_color(payload, "color", path),
            "children": _decode_children(payload, path),
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "TextBlockContent":
        return cls(**cls._fields(payload, path))

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "rich_text": encode_rich_text_list(self.rich_text),
            "color": self.color.value,
        }
        if self.children:
            result["children"] = [child.to_json() for child in self.children]
        return result


@dataclass(frozen=True)
class Paragraph(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.PARAGRAPH


@dataclass(frozen=True)
class Heading(TextBlockContent):
    """Common shape of the three heading levels."""

    is_toggleable: bool = False

    level: ClassVar[int]

    @classmethod
    def _fields(cls, payload: dict[str, Any], path: str) -> dict[str, Any]:
        fields = super()._fields(payload, path)
        fields["is_toggleable"] = optional_field(payload, "is_toggleable", bool, path, default=False)
        return fields

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["is_toggleable"] = self.is_toggleable
        return result


@dataclass(frozen=True)
class Heading1(Heading):
    block_type: ClassVar[BlockType] = BlockType.HEADING_1
    level: ClassVar[int] = 1


@dataclass(frozen=True)
class Heading2(Heading):
    block_type: ClassVar[BlockType] = BlockType.HEADING_2
    level: ClassVar[int] = 2


@dataclass(frozen=True)
class Heading3(Heading):
    block_type: ClassVar[BlockType] = BlockType.HEADING_3
    level: ClassVar[int] = 3


@dataclass(frozen=True)
class BulletedListItem(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.BULLETED_LIST_ITEM


@dataclass(frozen=True)
class NumberedListItem(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.NUMBERED_LIST_ITEM


@dataclass(frozen=True)
class Toggle(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.TOGGLE


@dataclass(frozen=True)
class Quote(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.QUOTE


@dataclass(frozen=True)
class ToDo(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.TO_DO

    checked: bool = False

    @classmethod
    def _fields(cls, payload: dict[str, Any], path: str) -> dict[str, Any]:
        fields = super()._fields(payload, path)
        fields["checked"] = optional_field(payload, "checked", bool, path, default=False)
        return fields

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        result["checked"] = self.checked
        return result


@dataclass(frozen=True)
class Callout(TextBlockContent):
    block_type: ClassVar[BlockType] = BlockType.CALLOUT

    icon: Icon | None = None

    @classmethod
    def _fields(cls, payload: dict[str, Any], path: str) -> dict[str, Any]:
        fields = super()._fields(payload, path)
        icon = payload.get("icon")
        fields["icon"] = None if icon is None else Icon.from_json(icon, join_path(path, "icon"))
        return fields

    def to_json(self) -> dict[str, Any]:
        result = super().to_json()
        if self.icon is not None:
            result["icon"] = self.icon.to_json()
        return result


@dataclass(frozen=True)
class Code(BlockContent):
    block_type: ClassVar[BlockType] = BlockType.CODE

    rich_text: tuple[RichText, ...] = ()
    language: str = "plain text"
    caption: tuple[RichText, ...] = ()

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.rich_text)

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "Code":
        return cls(
            rich_text=decode_rich_text_list(
                require_field(payload, "rich_text", list, path), join_path(path, "rich_text")
            ),
            language=optional_field(payload, "language", str, path, default="plain text"),
            caption=_decode_caption(payload, path),
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "rich_text": encode_rich_text_list(self.rich_text),
            "language": self.language,
            "caption": encode_rich_text_list(self.caption),
        }


@dataclass(frozen=True)
class Divider(BlockContent):
    block_type: ClassVar[BlockType] = BlockType.DIVIDER

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "Divider":
        return cls()

    def to_json(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class MediaBlockContent(BlockContent):
    """Image, video and file blocks: a file reference with caption."""

    file: FileObject

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "MediaBlockContent":
        return cls(file=FileObject.from_json(payload, path))

    def to_json(self) -> dict[str, Any]:
        return self.file.to_json()


@dataclass(frozen=True)
class Image(MediaBlockContent):
    block_type: ClassVar[BlockType] = BlockType.IMAGE


@dataclass(frozen=True)
class Video(MediaBlockContent):
    block_type: ClassVar[BlockType] = BlockType.VIDEO


@dataclass(frozen=True)
class File(MediaBlockContent):
    block_type: ClassVar[BlockType] = BlockType.FILE


@dataclass(frozen=True)
class Bookmark(BlockContent):
    block_type: ClassVar[BlockType] = BlockType.BOOKMARK

    url: str | None = None
    caption: tuple[RichText, ...] = ()

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "Bookmark":
        return cls(url=optional_url(payload, "url", path), caption=_decode_caption(payload, path))

    def to_json(self) -> dict[str, Any]:
        return {"url": self.url or "", "caption": encode_rich_text_list(self.caption)}


@dataclass(frozen=True)
class ChildPage(BlockContent):
    block_type: ClassVar[BlockType] = BlockType.CHILD_PAGE

    title: str = ""

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "ChildPage":
        return cls(title=require_field(payload, "title", str, path))

    def to_json(self) -> dict[str, Any]:
        return {"title": self.title}


@dataclass(frozen=True)
class TableRow(BlockContent):
    block_type: ClassVar[BlockType] = BlockType.TABLE_ROW

    cells: tuple[tuple[RichText, ...], ...] = ()

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "TableRow":
        cells_path = join_path(path, "cells")
        cells = require_list(payload, "cells", path)
        return cls(
            cells=tuple(
                decode_rich_text_list(cell, join_path(cells_path, i)) for i, cell in enumerate(cells)
            )
        )

    def to_json(self) -> dict[str, Any]:
        return {"cells": [encode_rich_text_list(cell) for cell in self.cells]}


@dataclass(frozen=True)
class Table(BlockContent):
    """Table block. Rows are ``table_row`` children, only present when writing."""

    block_type: ClassVar[BlockType] = BlockType.TABLE

    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False
    children: tuple["Block", ...] = ()

    @classmethod
    def from_json(cls, payload: dict[str, Any], path: str) -> "Table":
        return cls(
            table_width=require_field(payload, "table_width", int, path),
            has_column_header=optional_field(payload, "has_column_header", bool, path, default=False),
            has_row_header=optional_field(payload, "has_row_header", bool, path, default=False),
            children=_decode_children(payload, path),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "table_width": self.table_width,
            "has_column_header": self.has_column_header,
            "has_row_header": self.has_row_header,
        }
        if self.children:
            result["children"] = [child.to_json() for child in self.children]
        return result


@dataclass(frozen=True)
class Unsupported(BlockContent):
    """A block type this library doesn't model. The payload is kept verbatim."""

    block_type: ClassVar[BlockType] = BlockType.UNSUPPORTED

    name: str = BlockType.UNSUPPORTED.value
    payload: JSON = field(default=JSON.null)

    @property
    def type_name(self) -> str:
        return self.name

    def to_json(self) -> Any:
        return self.payload.to_python()


_CONTENT_TYPES: dict[BlockType, type[BlockContent]] = {
    content.block_type: content
    for content in (
        Paragraph,
        Heading1,
        Heading2,
        Heading3,
        BulletedListItem,
        NumberedListItem,
        ToDo,
        Toggle,
        Code,
        Callout,
        Quote,
        Divider,
        Image,
        Video,
        File,
        Bookmark,
        ChildPage,
        Table,
        TableRow,
    )
}

# Block types that can't be created through the append-children endpoint
_NOT_APPENDABLE = frozenset([BlockType.CHILD_PAGE, BlockType.UNSUPPORTED])


# =============================================================================
# BLOCK
# =============================================================================


@dataclass(frozen=True)
class Block:
    """One unit of page content.

    Metadata fields are None for blocks built locally (see ``builders``) and
    populated for blocks fetched from the API.
    """

    content: BlockContent
    id: str | None = None
    parent: Parent | None = None
    created_time: datetime | None = None
    last_edited_time: datetime | None = None
    created_by: PartialUser | None = None
    last_edited_by: PartialUser | None = None
    has_children: bool = False
    archived: bool = False

    object: ClassVar[str] = "block"

    @property
    def type(self) -> BlockType:
        return self.content.block_type

    @property
    def type_name(self) -> str:
        """The wire discriminator; differs from ``type`` only for unsupported blocks."""
        return self.content.type_name

    @property
    def child_page_title(self) -> str | None:
        if isinstance(self.content, ChildPage):
            return self.content.title
        return None

    @property
    def is_appendable(self) -> bool:
        return self.type not in _NOT_APPENDABLE

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "Block":
        """Decode a block object.

        Raises:
            DecodeError: If the payload for a known type is missing or malformed,
                if more than one payload is present, or if a metadata field is
                malformed.
        """
        obj = require_object(obj, path)
        object_kind = optional_field(obj, "object", str, path, default="block")
        if object_kind != "block":
            raise DecodeError(f"Expected a block, got {object_kind!r}", join_path(path, "object"))

        type_name = require_field(obj, "type", str, path)
        try:
            block_type = BlockType(type_name)
        except ValueError:
            block_type = BlockType.UNSUPPORTED

        if block_type is BlockType.UNSUPPORTED:
            logger.debug(f"Decoding unsupported block type {type_name!r} at {path or '<root>'}")
            content: BlockContent = Unsupported(name=type_name, payload=JSON(obj.get(type_name)))
        else:
            payload = require_field(obj, type_name, dict, path)
            extra = [
                other.value
                for other in _CONTENT_TYPES
                if other is not block_type and other.value in obj
            ]
            if extra:
                raise DecodeError(
                    f"Block of type {type_name!r} also carries payload {extra}", path or "<root>"
                )
            content = _CONTENT_TYPES[block_type].from_json(payload, join_path(path, type_name))

        parent = obj.get("parent")
        return cls(
            content=content,
            id=optional_field(obj, "id", str, path),
            parent=None if parent is None else Parent.from_json(parent, join_path(path, "parent")),
            created_time=optional_timestamp(obj, "created_time", path),
            last_edited_time=optional_timestamp(obj, "last_edited_time", path),
            created_by=optional_partial_user(obj, "created_by", path),
            last_edited_by=optional_partial_user(obj, "last_edited_by", path),
            has_children=optional_field(obj, "has_children", bool, path, default=False),
            archived=optional_field(obj, "archived", bool, path, default=False),
        )

    def to_json(self) -> dict[str, Any]:
        """Encode the block with every populated field."""
        result: dict[str, Any] = {"object": self.object}
        if self.id is not None:
            result["id"] = self.id
        if self.parent is not None:
            result["parent"] = self.parent.to_json()
        if self.created_time is not None:
            result["created_time"] = format_timestamp(self.created_time)
        if self.last_edited_time is not None:
            result["last_edited_time"] = format_timestamp(self.last_edited_time)
        if self.created_by is not None:
            result["created_by"] = self.created_by.to_json()
        if self.last_edited_by is not None:
            result["last_edited_by"] = self.last_edited_by.to_json()
        if self.id is not None or self.has_children:
            result["has_children"] = self.has_children
        if self.id is not None or self.archived:
            result["archived"] = self.archived
        result["type"] = self.type_name
        result[self.type_name] = self.content.to_json()
        return result

    def to_request(self) -> dict[str, Any]:
        """Encode the block for an append request.

        Read-only metadata (id, parent, timestamps, ...) is dropped, here and in
        any nested children.

        Raises:
            ValueError: If the block type can't be created through the API.
        """
        if not self.is_appendable:
            raise ValueError(f"{self.type_name} blocks can't be created via the blocks API")
        return _strip_metadata(self).to_json()


def _strip_metadata(block: Block) -> Block:
    content = block.content
    children = getattr(content, "children", ())
    if children:
        content = replace(content, children=tuple(_strip_metadata(child) for child in children))
    return Block(content=content)
