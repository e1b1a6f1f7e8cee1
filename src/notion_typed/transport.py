"""HTTP transport used by the client.

The client only needs one operation: send a request and get back the status
code and raw body. Anything implementing ``Transport`` can be plugged in;
tests use an in-memory fake.
"""

import logging
from typing import Any, Protocol

from notion_client import Client

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Sends one request to the Notion API.

    ``path`` is relative to the API root (``pages/<id>``, ``users``, ...).
    ``body`` is already encoded JSON. Failures to reach the server are raised
    as whatever exception the implementation uses; HTTP error statuses are
    returned, not raised.
    """

    def send(
        self,
        method: str,
        path: str,
        query: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        ...


class NotionSDKTransport:
    """Transport backed by the official ``notion_client`` SDK.

    Requests go through the SDK's configured ``httpx.Client``, which carries
    the base URL, bearer token, ``Notion-Version`` header and timeout. The
    SDK's own response handling is bypassed so error bodies reach our decoder.

    Attributes:
        notion: The underlying notion_client.Client instance.
        request_count: Total number of requests sent.
    """

    def __init__(self, notion: Client):
        """Initialize the transport.

        Args:
            notion: A configured notion_client.Client instance.
        """
        self.notion = notion
        self.request_count: int = 0

    def send(
        self,
        method: str,
        path: str,
        query: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> tuple[int, bytes]:
        headers: dict[str, Any] = {}
        if body is not None:
            headers["Content-Type"] = "application/json"
        self.request_count += 1
        response = self.notion.client.request(
            method,
            path,
            params=query or None,
            content=body,
            headers=headers,
        )
        logger.debug(f"{method} {path} -> {response.status_code}")
        return response.status_code, response.content
