"""Wire entities shared by blocks, pages and properties."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from notion_typed.decoding import (
    format_timestamp,
    join_path,
    optional_field,
    optional_timestamp,
    optional_url,
    require_field,
    require_object,
)
from notion_typed.errors import DecodeError
from notion_typed.rich_text import RichText, decode_rich_text_list, encode_rich_text_list


class ParentType(str, Enum):
    DATABASE_ID = "database_id"
    PAGE_ID = "page_id"
    BLOCK_ID = "block_id"
    WORKSPACE = "workspace"


@dataclass(frozen=True)
class Parent:
    """Where a page or block lives. Exactly one of database/page/block/workspace."""

    type: ParentType
    id: str | None = None

    def __post_init__(self):
        if self.type is ParentType.WORKSPACE:
            if self.id is not None:
                raise ValueError("Workspace parents carry no id")
        elif not self.id:
            raise ValueError(f"{self.type.value} parent requires an id")

    @classmethod
    def page(cls, page_id: str) -> "Parent":
        return cls(ParentType.PAGE_ID, page_id)

    @classmethod
    def database(cls, database_id: str) -> "Parent":
        return cls(ParentType.DATABASE_ID, database_id)

    @classmethod
    def block(cls, block_id: str) -> "Parent":
        return cls(ParentType.BLOCK_ID, block_id)

    @classmethod
    def workspace(cls) -> "Parent":
        return cls(ParentType.WORKSPACE)

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "Parent":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            parent_type = ParentType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown parent type {type_name!r}", join_path(path, "type")) from None
        if parent_type is ParentType.WORKSPACE:
            return cls(parent_type)
        return cls(parent_type, require_field(obj, type_name, str, path))

    def to_json(self) -> dict[str, Any]:
        if self.type is ParentType.WORKSPACE:
            return {"type": "workspace", "workspace": True}
        return {"type": self.type.value, self.type.value: self.id}


@dataclass(frozen=True)
class PartialUser:
    """A user reference carrying only the id."""

    id: str
    object: str = "user"

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "PartialUser":
        obj = require_object(obj, path)
        return cls(
            id=require_field(obj, "id", str, path),
            object=optional_field(obj, "object", str, path, default="user"),
        )

    def to_json(self) -> dict[str, Any]:
        return {"object": self.object, "id": self.id}


def optional_partial_user(obj: dict[str, Any], key: str, path: str) -> PartialUser | None:
    value = obj.get(key)
    if value is None:
        return None
    return PartialUser.from_json(value, join_path(path, key))


class FileType(str, Enum):
    EXTERNAL = "external"
    FILE = "file"


@dataclass(frozen=True)
class FileObject:
    """A file reference: external URL or a Notion-hosted file.

    Notion-hosted URLs expire; ``expiry_time`` says when. ``caption`` is used
    by media blocks, ``name`` by file blocks and the files property.
    """

    type: FileType
    url: str | None = None
    expiry_time: datetime | None = None
    caption: tuple[RichText, ...] = ()
    name: str | None = None

    @classmethod
    def external(cls, url: str, caption: tuple[RichText, ...] = (), name: str | None = None) -> "FileObject":
        return cls(FileType.EXTERNAL, url=url, caption=caption, name=name)

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "FileObject":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            file_type = FileType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown file type {type_name!r}", join_path(path, "type")) from None
        payload_path = join_path(path, type_name)
        payload = require_field(obj, type_name, dict, path)
        caption = obj.get("caption")
        return cls(
            type=file_type,
            url=optional_url(payload, "url", payload_path),
            expiry_time=optional_timestamp(payload, "expiry_time", payload_path),
            caption=() if caption is None else decode_rich_text_list(caption, join_path(path, "caption")),
            name=optional_field(obj, "name", str, path),
        )

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"url": self.url or ""}
        if self.expiry_time is not None:
            payload["expiry_time"] = format_timestamp(self.expiry_time)
        result: dict[str, Any] = {"type": self.type.value, self.type.value: payload}
        if self.caption:
            result["caption"] = encode_rich_text_list(self.caption)
        if self.name is not None:
            result["name"] = self.name
        return result


class IconType(str, Enum):
    EMOJI = "emoji"
    EXTERNAL = "external"
    FILE = "file"


@dataclass(frozen=True)
class Icon:
    """Page or callout icon: an emoji or a file."""

    type: IconType
    emoji: str | None = None
    file: FileObject | None = None

    @classmethod
    def from_emoji(cls, emoji: str) -> "Icon":
        return cls(IconType.EMOJI, emoji=emoji)

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "Icon":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            icon_type = IconType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown icon type {type_name!r}", join_path(path, "type")) from None
        if icon_type is IconType.EMOJI:
            return cls(icon_type, emoji=require_field(obj, "emoji", str, path))
        return cls(icon_type, file=FileObject.from_json(obj, path))

    def to_json(self) -> dict[str, Any]:
        if self.type is IconType.EMOJI:
            return {"type": "emoji", "emoji": self.emoji}
        return self.file.to_json()
