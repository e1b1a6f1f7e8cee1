"""Notion users (people and bots)."""

from dataclasses import dataclass, field
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


class UserType(str, Enum):
    PERSON = "person"
    BOT = "bot"


@dataclass(frozen=True)
class PersonData:
    email: str | None = None


@dataclass(frozen=True)
class BotData:
    """Bot details (owner, workspace name) kept as raw JSON."""

    raw: JSON = field(default=JSON.null)


@dataclass(frozen=True)
class User:
    """A workspace member or integration.

    Exactly one of ``person``/``bot`` is set, matching ``type``.
    """

    id: str
    type: UserType
    name: str | None = None
    avatar_url: str | None = None
    person: PersonData | None = None
    bot: BotData | None = None
    object: str = "user"

    @classmethod
    def from_json(cls, obj: Any, path: str = "") -> "User":
        obj = require_object(obj, path)
        type_name = require_field(obj, "type", str, path)
        try:
            user_type = UserType(type_name)
        except ValueError:
            raise DecodeError(f"Unknown user type {type_name!r}", join_path(path, "type")) from None

        person = bot = None
        if user_type is UserType.PERSON:
            person_obj = optional_field(obj, "person", dict, path, default={})
            person = PersonData(
                email=optional_field(person_obj, "email", str, join_path(path, "person"))
            )
        else:
            bot = BotData(raw=JSON(optional_field(obj, "bot", dict, path, default={})))

        return cls(
            id=require_field(obj, "id", str, path),
            type=user_type,
            name=optional_field(obj, "name", str, path),
            avatar_url=optional_url(obj, "avatar_url", path),
            person=person,
            bot=bot,
            object=optional_field(obj, "object", str, path, default="user"),
        )

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "object": self.object,
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "avatar_url": self.avatar_url,
        }
        if self.type is UserType.PERSON:
            result["person"] = {} if self.person.email is None else {"email": self.person.email}
        else:
            result["bot"] = self.bot.raw.to_python() if not self.bot.raw.is_null else {}
        return result
