"""Notion pages (metadata and properties, not content).

Page content lives in blocks; fetch it with ``NotionClient.block_children``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping

from notion_typed.common import FileObject, Icon, Parent, PartialUser, optional_partial_user
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
from notion_typed.properties import PageProperty, PropertyType


@dataclass(frozen=True)
class Page:
    """A page, either standalone or a row of a database.

    Attributes:
        id: Page ID.
        parent: Workspace, page or database the page lives in.
        properties: Read-only mapping of property name to typed value.
            Standalone pages only have a ``title`` property.
        url: Notion URL of the page.
    """

    id: str
    parent: Parent | None = None
    properties: Mapping[str, PageProperty] = field(default_factory=dict)
    created_time: datetime | None = None
    last_edited_time: datetime | None = None
    created_by: PartialUser | None = None
    last_edited_by: PartialUser | None = None
    cover: FileObject | None = None
    icon: Icon | None = None
    archived: bool = False
    url: str | None = None
    public_url: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "properties", MappingProxyType(dict(self.properties)))

    def __hash__(self) -> int:
        return hash((self.id, self.last_edited_time))

    @property
    def title(self) -> str | None:
        """Plain text of the title property, or None if the page has none."""
        prop = self.title_property
        return None if prop is None else prop.plain_text

    @property
    def title_property(self) -> PageProperty | None:
        for prop in self.properties.values():
            if prop.type is PropertyType.TITLE:
                return prop
        return None

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "Page":
        """Decode a page object.

        Raises:
            DecodeError: If the object isn't a page or a field is malformed.
        """
        obj = require_object(obj, path)
        object_kind = require_field(obj, "object", str, path)
        if object_kind != "page":
            raise DecodeError(f"Expected a page, got {object_kind!r}", join_path(path, "object"))

        properties_path = join_path(path, "properties")
        raw_properties = optional_field(obj, "properties", dict, path, default={})
        properties = {
            name: PageProperty.from_json(value, join_path(properties_path, name))
            for name, value in raw_properties.items()
        }

        parent = obj.get("parent")
        cover = obj.get("cover")
        icon = obj.get("icon")
        return cls(
            id=require_field(obj, "id", str, path),
            parent=None if parent is None else Parent.from_json(parent, join_path(path, "parent")),
            properties=properties,
            created_time=optional_timestamp(obj, "created_time", path),
            last_edited_time=optional_timestamp(obj, "last_edited_time", path),
            created_by=optional_partial_user(obj, "created_by", path),
            last_edited_by=optional_partial_user(obj, "last_edited_by", path),
            cover=None if cover is None else FileObject.from_json(cover, join_path(path, "cover")),
            icon=None if icon is None else Icon.from_json(icon, join_path(path, "icon")),
            archived=optional_field(obj, "archived", bool, path, default=False),
            url=optional_url(obj, "url", path),
            public_url=optional_url(obj, "public_url", path),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"object": "page", "id": self.id}
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
        result["cover"] = None if self.cover is None else self.cover.to_json()
        result["icon"] = None if self.icon is None else self.icon.to_json()
        result["archived"] = self.archived
        result["properties"] = {name: prop.to_json() for name, prop in self.properties.items()}
        if self.url is not None:
            result["url"] = self.url
        if self.public_url is not None:
            result["public_url"] = self.public_url
        return result
