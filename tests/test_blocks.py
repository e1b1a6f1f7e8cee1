"""Tests for notion_typed.blocks module."""

from datetime import datetime, timezone

import pytest

from notion_typed import Block, BlockType, Color, DecodeError, JSON, Parent, PartialUser, Unsupported
from notion_typed.blocks import (
    Bookmark,
    Callout,
    ChildPage,
    Code,
    Divider,
    Heading2,
    Image,
    Paragraph,
    Table,
    TableRow,
    ToDo,
)
from notion_typed.common import FileType

from .conftest import block_json, paragraph_json, rich_text_json


KNOWN_BLOCKS = [
    ("paragraph", {"rich_text": [rich_text_json("Hello")], "color": "default"}),
    ("heading_1", {"rich_text": [rich_text_json("Title")], "color": "blue", "is_toggleable": False}),
    ("heading_2", {"rich_text": [rich_text_json("Section")], "color": "default", "is_toggleable": True}),
    ("heading_3", {"rich_text": [], "color": "gray_background", "is_toggleable": False}),
    ("bulleted_list_item", {"rich_text": [rich_text_json("item")], "color": "default"}),
    ("numbered_list_item", {"rich_text": [rich_text_json("step")], "color": "default"}),
    ("to_do", {"rich_text": [rich_text_json("Buy milk")], "color": "default", "checked": True}),
    ("toggle", {"rich_text": [rich_text_json("More")], "color": "default"}),
    ("code", {"rich_text": [rich_text_json("print(1)")], "language": "python", "caption": []}),
    (
        "callout",
        {"rich_text": [rich_text_json("Note")], "color": "yellow_background", "icon": {"type": "emoji", "emoji": "💡"}},
    ),
    ("quote", {"rich_text": [rich_text_json("Quote")], "color": "default"}),
    ("divider", {}),
    (
        "image",
        {
            "type": "file",
            "file": {"url": "https://s3.example.com/a.png", "expiry_time": "2024-04-26T14:00:00.000Z"},
            "caption": [rich_text_json("A picture")],
        },
    ),
    ("video", {"type": "external", "external": {"url": "https://youtu.be/x"}}),
    ("file", {"type": "external", "external": {"url": "https://example.com/a.pdf"}, "name": "a.pdf"}),
    ("bookmark", {"url": "https://example.com", "caption": []}),
    ("child_page", {"title": "2024"}),
    ("table", {"table_width": 2, "has_column_header": True, "has_row_header": False}),
    ("table_row", {"cells": [[rich_text_json("a")], [rich_text_json("b")]]}),
]


class TestRoundTrip:
    """decode(encode(b)) == b for every known block kind."""

    @pytest.mark.parametrize("block_type,payload", KNOWN_BLOCKS, ids=[t for t, _ in KNOWN_BLOCKS])
    def test_fetched_block(self, block_type, payload):
        """Fetched blocks with full metadata survive an encode/decode cycle."""
        block = Block.from_json(block_json(block_type, payload))
        assert block.type_name == block_type
        assert block.type is BlockType(block_type)
        assert Block.from_json(block.to_json()) == block

    @pytest.mark.parametrize("block_type,payload", KNOWN_BLOCKS, ids=[t for t, _ in KNOWN_BLOCKS])
    def test_encoded_payload_matches_discriminator(self, block_type, payload):
        """Encoding writes the type and exactly one payload field."""
        encoded = Block.from_json(block_json(block_type, payload)).to_json()
        assert encoded["type"] == block_type
        payload_keys = {t for t, _ in KNOWN_BLOCKS} & set(encoded)
        assert payload_keys == {block_type}


class TestDecoding:
    """Tests for Block.from_json()."""

    def test_metadata(self):
        block = Block.from_json(paragraph_json("Hi", block_id="b1", has_children=True))
        assert block.id == "b1"
        assert block.parent == Parent.page("page-1")
        assert block.created_time == datetime(2024, 4, 26, 13, 0, tzinfo=timezone.utc)
        assert block.created_by == PartialUser("user-1")
        assert block.has_children is True
        assert block.archived is False

    def test_typed_payload(self):
        block = Block.from_json(block_json("to_do", {"rich_text": [rich_text_json("Buy")], "checked": True}))
        assert isinstance(block.content, ToDo)
        assert block.content.checked is True
        assert block.content.plain_text == "Buy"
        assert block.content.color is Color.DEFAULT

    def test_heading_level(self):
        block = Block.from_json(block_json("heading_2", {"rich_text": [], "is_toggleable": True}))
        assert isinstance(block.content, Heading2)
        assert block.content.level == 2
        assert block.content.is_toggleable is True

    def test_media_file(self):
        block = Block.from_json(
            block_json("image", {"type": "file", "file": {"url": "https://s3/a.png", "expiry_time": "2024-04-26T14:00:00.000Z"}})
        )
        assert isinstance(block.content, Image)
        assert block.content.file.type is FileType.FILE
        assert block.content.file.expiry_time == datetime(2024, 4, 26, 14, 0, tzinfo=timezone.utc)

    def test_empty_bookmark_url_is_absent(self):
        block = Block.from_json(block_json("bookmark", {"url": "", "caption": []}))
        assert isinstance(block.content, Bookmark)
        assert block.content.url is None

    def test_child_page_title(self):
        block = Block.from_json(block_json("child_page", {"title": "March"}))
        assert block.child_page_title == "March"
        assert Block.from_json(paragraph_json("x")).child_page_title is None

    def test_unknown_type_is_unsupported(self):
        """New server-side types decode to the unsupported variant."""
        data = block_json("synced_block", {"synced_from": None, "children": []})
        block = Block.from_json(data)
        assert block.type is BlockType.UNSUPPORTED
        assert block.type_name == "synced_block"
        assert isinstance(block.content, Unsupported)
        assert block.content.payload == JSON({"synced_from": None, "children": []})
        assert block.to_json() == data

    def test_unsupported_discriminator_itself(self):
        block = Block.from_json(block_json("unsupported", {}))
        assert block.type is BlockType.UNSUPPORTED

    def test_missing_payload(self):
        data = block_json("paragraph", {})
        del data["paragraph"]
        with pytest.raises(DecodeError) as exc:
            Block.from_json(data)
        assert exc.value.path == "paragraph"

    def test_payload_of_wrong_type(self):
        """A paragraph block carrying a heading payload is rejected."""
        data = block_json("paragraph", {"rich_text": []})
        data["heading_1"] = {"rich_text": []}
        with pytest.raises(DecodeError):
            Block.from_json(data)

    def test_discriminator_without_matching_payload(self):
        data = block_json("divider", {})
        del data["divider"]
        data["paragraph"] = {"rich_text": []}
        with pytest.raises(DecodeError):
            Block.from_json(data)

    def test_malformed_payload_path(self):
        with pytest.raises(DecodeError) as exc:
            Block.from_json(block_json("to_do", {"rich_text": [], "checked": "yes"}), "results[2]")
        assert exc.value.path == "results[2].to_do.checked"

    def test_not_a_block(self):
        with pytest.raises(DecodeError):
            Block.from_json({"object": "page", "type": "paragraph", "paragraph": {"rich_text": []}})

    def test_date_only_timestamp_rejected(self):
        with pytest.raises(DecodeError) as exc:
            Block.from_json(paragraph_json("x", created_time="2024-04-26"))
        assert exc.value.path == "created_time"

    def test_non_ascii_digits_in_timestamp_rejected(self):
        with pytest.raises(DecodeError) as exc:
            Block.from_json(paragraph_json("x", created_time="\u0662\u0660\u0662\u0664-04-26T13:00:00.000Z"))
        assert exc.value.path == "created_time"

    def test_timestamp_with_offset(self):
        block = Block.from_json(paragraph_json("x", last_edited_time="2024-04-26T15:00:00+02:00"))
        assert block.last_edited_time == datetime(2024, 4, 26, 13, 0, tzinfo=timezone.utc)
        assert block.to_json()["last_edited_time"] == "2024-04-26T13:00:00.000Z"

    def test_microsecond_timestamp_kept(self):
        block = Block.from_json(paragraph_json("x", created_time="2024-04-26T13:00:00.123456Z"))
        assert block.to_json()["created_time"] == "2024-04-26T13:00:00.123456Z"


class TestLocalBlocks:
    """Blocks built locally carry no metadata."""

    def test_encode_without_metadata(self):
        block = Block(Paragraph(rich_text=()))
        assert block.to_json() == {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": [], "color": "default"},
        }

    def test_local_round_trip_with_children(self):
        row = Block(TableRow(cells=((), ())))
        block = Block(Table(table_width=2, children=(row, row)))
        assert Block.from_json(block.to_json()) == block

    def test_to_request_strips_nested_metadata(self):
        child = Block.from_json(paragraph_json("nested", block_id="child"))
        parent = Block(Callout(rich_text=(), children=(child,)))
        request = parent.to_request()
        nested = request["callout"]["children"][0]
        assert "id" not in nested
        assert "created_time" not in nested
        assert nested["paragraph"]["rich_text"][0]["text"]["content"] == "nested"

    def test_child_page_not_appendable(self):
        block = Block(ChildPage(title="x"))
        assert block.is_appendable is False
        with pytest.raises(ValueError):
            block.to_request()

    def test_code_defaults(self):
        assert Block(Code()).to_json()["code"]["language"] == "plain text"
        assert Block(Divider()).to_request() == {"object": "block", "type": "divider", "divider": {}}
