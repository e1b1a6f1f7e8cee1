"""Shared pytest fixtures and helpers.

Unit tests talk to ``NotionClient`` through ``FakeTransport``, which replays
queued responses and records every request. Live tests (``test_live.py``)
use the real API and are skipped unless credentials are configured.
"""

import json
import logging
import os
from collections import deque
from dataclasses import dataclass
from typing import Any

import pytest
from dotenv import load_dotenv

from notion_typed import NotionClient

# Load .env file
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass
class SentRequest:
    """One request seen by FakeTransport (body decoded from JSON)."""

    method: str
    path: str
    query: dict[str, str] | None
    body: Any


class FakeTransport:
    """In-memory transport replaying queued ``(status, body)`` responses.

    Bodies may be JSON-able Python data, raw bytes, or an exception to raise.
    """

    def __init__(self):
        self.responses: deque = deque()
        self.calls: list[SentRequest] = []

    def queue(self, body: Any, status: int = 200) -> "FakeTransport":
        self.responses.append((status, body))
        return self

    def send(self, method, path, query=None, body=None):
        self.calls.append(
            SentRequest(method, path, query, None if body is None else json.loads(body))
        )
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {path}")
        status, payload = self.responses.popleft()
        if isinstance(payload, Exception):
            raise payload
        if isinstance(payload, bytes):
            return status, payload
        return status, json.dumps(payload).encode("utf-8")


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return NotionClient(transport)


# Helper functions for building wire objects


def rich_text_json(content: str, **annotations) -> dict:
    span = {"type": "text", "text": {"content": content, "link": None}, "plain_text": content, "href": None}
    if annotations:
        span["annotations"] = {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
            **annotations,
        }
    return span


def block_json(block_type: str, payload: dict, block_id: str = "block-1", **extra) -> dict:
    """A block as returned by the API, with full metadata."""
    block = {
        "object": "block",
        "id": block_id,
        "parent": {"type": "page_id", "page_id": "page-1"},
        "created_time": "2024-04-26T13:00:00.000Z",
        "last_edited_time": "2024-04-26T13:05:00.000Z",
        "created_by": {"object": "user", "id": "user-1"},
        "last_edited_by": {"object": "user", "id": "user-1"},
        "has_children": False,
        "archived": False,
        "type": block_type,
        block_type: payload,
    }
    block.update(extra)
    return block


def paragraph_json(content: str, block_id: str = "block-1", **extra) -> dict:
    return block_json(
        "paragraph", {"rich_text": [rich_text_json(content)] if content else [], "color": "default"}, block_id, **extra
    )


def list_json(results: list, next_cursor: str | None = None, has_more: bool = False) -> dict:
    return {
        "object": "list",
        "results": results,
        "next_cursor": next_cursor,
        "has_more": has_more,
        "type": "block",
        "block": {},
    }


def page_json(page_id: str = "page-1", title: str = "Diary", properties: dict | None = None) -> dict:
    props = {"title": {"id": "title", "type": "title", "title": [rich_text_json(title)]}}
    props.update(properties or {})
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2024-04-26T13:00:00.000Z",
        "last_edited_time": "2024-04-26T13:00:00.000Z",
        "created_by": {"object": "user", "id": "user-1"},
        "last_edited_by": {"object": "user", "id": "user-1"},
        "cover": None,
        "icon": {"type": "emoji", "emoji": "📓"},
        "parent": {"type": "workspace", "workspace": True},
        "archived": False,
        "properties": props,
        "url": f"https://www.notion.so/{page_id}",
        "public_url": None,
    }


def user_json(user_id: str = "user-1", name: str = "Ada", email: str = "ada@example.com") -> dict:
    return {
        "object": "user",
        "id": user_id,
        "type": "person",
        "name": name,
        "avatar_url": None,
        "person": {"email": email},
    }


def error_json(status: int, code: str, message: str, request_id: str | None = None) -> dict:
    body = {"object": "error", "status": status, "code": code, "message": message}
    if request_id is not None:
        body["request_id"] = request_id
    return body


# Live test fixtures


@pytest.fixture(scope="session")
def live_parent_page():
    """Parent page ID for live tests; skips when credentials are missing."""
    if not os.getenv("NOTION_API_TOKEN"):
        pytest.skip("NOTION_API_TOKEN not set - skipping live tests")
    parent_id = os.getenv("TEST_PAGE_ID")
    if not parent_id:
        pytest.skip("TEST_PAGE_ID not set - skipping live tests")
    return parent_id
