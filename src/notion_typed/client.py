"""Notion Typed Client - typed facade over a pluggable transport."""

import logging
import os
from typing import Any, Callable, Iterable, TypeVar

from notion_client import Client

from notion_typed.blocks import Block
from notion_typed.common import Parent
from notion_typed.errors import DecodeError, NotionAPIError
from notion_typed.json_value import JSON
from notion_typed.pages import Page
from notion_typed.pagination import ListResponse, PaginatedSequence
from notion_typed.properties import PageProperty
from notion_typed.transport import NotionSDKTransport, Transport
from notion_typed.users import User
from notion_typed.utils import get_notion_token

logger = logging.getLogger(__name__)

NOTION_VERSION = "2022-06-28"

T = TypeVar("T")


def _list_decoder(decode_item: Callable[[Any, str], T]) -> Callable[[Any], ListResponse[T]]:
    return lambda obj: ListResponse.from_json(obj, decode_item)


def _process_response(status: int, data: bytes, decode: Callable[[Any], T]) -> T:
    """Turn a raw response into a typed value or an error.

    An ``{"object": "error"}`` body always raises ``NotionAPIError``, whatever
    type was expected.

    Raises:
        NotionAPIError: If the body is a Notion error object.
        DecodeError: If the body isn't JSON, doesn't match the expected type,
            or is a non-2xx response without an error object.
    """
    try:
        value = JSON.decode(data)
    except DecodeError as e:
        raise e.with_status(status) from e

    if value.get("object").string_value == "error":
        try:
            error = NotionAPIError.from_json(value.to_python())
        except DecodeError as e:
            raise e.with_status(status) from e
        logger.debug(f"API error {error.status} {error.code} (request_id={error.request_id})")
        raise error

    if not 200 <= status < 300:
        raise DecodeError("Error response without a Notion error object", status=status)

    try:
        return decode(value.to_python())
    except DecodeError as e:
        raise e.with_status(status) from e


class NotionClient:
    """Typed Notion API client.

    Each method performs exactly one request. The sequence helpers
    (``users``, ``database_pages``, ``block_children``) perform one request
    per page, lazily. No retries or rate limiting are applied; wrap the
    transport if you need them.

    Attributes:
        transport: Sends the HTTP requests.
    """

    def __init__(self, transport: Transport):
        """Initialize the client.

        Args:
            transport: Anything with a ``send(method, path, query, body)`` method.
        """
        self.transport = transport

    def _request(
        self,
        method: str,
        path: str,
        decode: Callable[[Any], T],
        query: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> T:
        params = {key: str(value) for key, value in (query or {}).items() if value is not None}
        payload = None if body is None else JSON(body).encode()
        logger.debug(f"{method} {path} params={params or None} body_bytes={len(payload or b'')}")
        status, data = self.transport.send(method, path, params or None, payload)
        return _process_response(status, data, decode)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_users(
        self, start_cursor: str | None = None, page_size: int | None = None
    ) -> ListResponse[User]:
        """List one page of workspace users.

        Args:
            start_cursor: Cursor from a previous page, None for the first page.
            page_size: Number of users per page (server default when None).

        Returns:
            One page of users.
        """
        return self._request(
            "GET",
            "users",
            _list_decoder(User.from_json),
            query={"start_cursor": start_cursor, "page_size": page_size},
        )

    def users(self, page_size: int | None = None) -> PaginatedSequence[User]:
        """Iterate over all workspace users, fetching pages on demand."""
        return PaginatedSequence(
            lambda cursor, size: self.get_users(start_cursor=cursor, page_size=size), page_size
        )

    # -------------------------------------------------------------------------
    # Pages and databases
    # -------------------------------------------------------------------------

    def get_page(self, page_id: str) -> Page:
        """Retrieve page metadata and properties.

        Args:
            page_id: The Notion page ID.

        Returns:
            The decoded page.

        Raises:
            NotionAPIError: On API errors (e.g. object_not_found).
            DecodeError: If the response isn't a page.
        """
        return self._request("GET", f"pages/{page_id}", Page.from_json)

    def create_page(
        self,
        parent: Parent,
        title: str | None = None,
        properties: dict[str, PageProperty] | None = None,
        children: Iterable[Block] | None = None,
    ) -> Page:
        """Create a page under a page or database.

        Args:
            parent: Parent page or database.
            title: Plain text title; stored as the ``title`` property.
            properties: Additional properties (database rows).
            children: Initial content blocks.

        Returns:
            The created page.

        Raises:
            ValueError: If a child block can't be created through the API.
        """
        props: dict[str, PageProperty] = dict(properties or {})
        if title is not None:
            props["title"] = PageProperty.title(title)

        body: dict[str, Any] = {
            "parent": parent.to_json(),
            "properties": {name: prop.to_request() for name, prop in props.items()},
        }
        if children is not None:
            body["children"] = [block.to_request() for block in children]
        return self._request("POST", "pages", Page.from_json, body=body)

    def query_database(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int | None = None,
    ) -> ListResponse[Page]:
        """Query one page of database rows.

        ``filter`` and ``sorts`` are passed through unchanged in Notion's
        query format.
        """
        body: dict[str, Any] = {}
        if filter is not None:
            body["filter"] = filter
        if sorts is not None:
            body["sorts"] = sorts
        if start_cursor is not None:
            body["start_cursor"] = start_cursor
        if page_size is not None:
            body["page_size"] = page_size
        return self._request(
            "POST", f"databases/{database_id}/query", _list_decoder(Page.from_json), body=body
        )

    def database_pages(
        self,
        database_id: str,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        page_size: int | None = None,
    ) -> PaginatedSequence[Page]:
        """Iterate over all rows matching a database query."""
        return PaginatedSequence(
            lambda cursor, size: self.query_database(
                database_id, filter=filter, sorts=sorts, start_cursor=cursor, page_size=size
            ),
            page_size,
        )

    # -------------------------------------------------------------------------
    # Blocks
    # -------------------------------------------------------------------------

    def get_block_children(
        self, block_id: str, start_cursor: str | None = None, page_size: int | None = None
    ) -> ListResponse[Block]:
        """List one page of a block's (or page's) direct children."""
        return self._request(
            "GET",
            f"blocks/{block_id}/children",
            _list_decoder(Block.from_json),
            query={"start_cursor": start_cursor, "page_size": page_size},
        )

    def block_children(self, block_id: str, page_size: int | None = None) -> PaginatedSequence[Block]:
        """Iterate over all direct children of a block or page.

        Pages are fetched lazily, one request each, as the sequence is consumed.

        Example:
            >>> for block in client.block_children(page_id):
            ...     print(block.type_name)
        """
        return PaginatedSequence(
            lambda cursor, size: self.get_block_children(block_id, start_cursor=cursor, page_size=size),
            page_size,
        )

    def append_block_children(
        self,
        block_id: str,
        blocks: Iterable[Block],
        after: str | None = None,
    ) -> ListResponse[Block]:
        """Append blocks to a page or block.

        At most 100 blocks per call (a Notion limit); see
        ``modify.append_blocks`` for batching.

        Args:
            block_id: Page or block ID to append to.
            blocks: Blocks to append, typically from ``builders``.
            after: Optional block ID to insert after.

        Returns:
            The created blocks as returned by the server.

        Raises:
            ValueError: If a block type can't be created through the API.
        """
        body: dict[str, Any] = {"children": [block.to_request() for block in blocks]}
        if after:
            body["after"] = after
        return self._request(
            "PATCH", f"blocks/{block_id}/children", _list_decoder(Block.from_json), body=body
        )

    def delete_block(self, block_id: str) -> None:
        """Delete (archive) a block.

        The server answers with the archived block, which is validated and
        discarded.
        """
        self._request("DELETE", f"blocks/{block_id}", Block.from_json)


def get_notion_client() -> NotionClient:
    """Factory function to create a configured NotionClient.

    Reads NOTION_API_TOKEN (and optionally NOTION_VERSION) from the
    environment and wraps an SDK client in the default transport.

    Returns:
        A configured NotionClient instance.

    Raises:
        ValueError: If NOTION_API_TOKEN environment variable is not set.
    """
    token = get_notion_token()
    notion_version = os.environ.get("NOTION_VERSION") or NOTION_VERSION
    notion = Client(auth=token, notion_version=notion_version)
    return NotionClient(NotionSDKTransport(notion))
