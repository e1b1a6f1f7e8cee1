"""Paginated list responses and the lazy sequence over them.

Every Notion list endpoint returns the same envelope::

    {"object": "list", "results": [...], "next_cursor": "c1", "has_more": true}

``PaginatedSequence`` walks such an endpoint one page at a time, only asking
for the next page once the current one has been consumed.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

from notion_typed.decoding import join_path, optional_field, require_field, require_object
from notion_typed.errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ListResponse(Generic[T]):
    """One page of results.

    ``next_cursor`` is None whenever ``has_more`` is False, and always set
    when it is True.
    """

    results: tuple[T, ...] = ()
    next_cursor: str | None = None
    has_more: bool = False
    object: str = "list"

    def __post_init__(self):
        if self.has_more and self.next_cursor is None:
            raise ValueError("has_more requires a next_cursor")
        if not self.has_more and self.next_cursor is not None:
            object.__setattr__(self, "next_cursor", None)

    def __len__(self) -> int:
        return len(self.results)

    def __iter__(self) -> Iterator[T]:
        return iter(self.results)

    @classmethod
    def from_json(
        cls, obj: Any, decode_item: Callable[[Any, str], T], path: str = ""
    ) -> "ListResponse[T]":
        """Decode a list envelope, decoding each result with ``decode_item``.

        Args:
            obj: The envelope as plain Python data.
            decode_item: Decoder called with ``(item, item_path)``.
            path: JSON path of the envelope, for error messages.

        Raises:
            DecodeError: If the envelope or any item is malformed, or if
                ``has_more`` is true without a ``next_cursor``.
        """
        obj = require_object(obj, path)
        object_kind = require_field(obj, "object", str, path)
        if object_kind != "list":
            raise DecodeError(f"Expected a list, got {object_kind!r}", join_path(path, "object"))

        results_path = join_path(path, "results")
        items = require_field(obj, "results", list, path)
        results = tuple(decode_item(item, join_path(results_path, i)) for i, item in enumerate(items))

        has_more = require_field(obj, "has_more", bool, path)
        next_cursor = optional_field(obj, "next_cursor", str, path)
        if not has_more:
            next_cursor = None
        elif next_cursor is None:
            raise DecodeError("has_more is true but next_cursor is missing", join_path(path, "next_cursor"))

        return cls(results=results, next_cursor=next_cursor, has_more=has_more, object=object_kind)

    def to_json(self, encode_item: Callable[[T], Any]) -> dict[str, Any]:
        return {
            "object": self.object,
            "results": [encode_item(item) for item in self.results],
            "next_cursor": self.next_cursor,
            "has_more": self.has_more,
        }


FetchPage = Callable[[str | None, int | None], ListResponse[T]]


class PaginatedSequence(Generic[T]):
    """Lazy iterator over every item of a paginated endpoint.

    Pages are fetched one at a time, on demand, starting with no cursor and
    following ``next_cursor`` until ``has_more`` is False. The sequence can
    only be iterated once; ``iter(seq)`` returns the sequence itself.

    If a fetch raises, the exception propagates and the sequence is left as
    it was, so calling ``next()`` again retries the same page.

    Not safe to consume from several threads at once.

    Attributes:
        page_size: Forwarded unchanged on every fetch (None lets the server choose).
        pages_fetched: Number of pages fetched so far.
    """

    def __init__(self, fetch: FetchPage[T], page_size: int | None = None):
        """Initialize the sequence.

        Args:
            fetch: Called as ``fetch(start_cursor, page_size)``; returns one page.
            page_size: Page size to request.
        """
        self._fetch = fetch
        self._page_size = page_size
        self._buffer: deque[T] = deque()
        self._cursor: str | None = None
        self._exhausted = False
        self.pages_fetched = 0

    @property
    def page_size(self) -> int | None:
        return self._page_size

    @property
    def exhausted(self) -> bool:
        """True once the last page has been fetched (buffered items may remain)."""
        return self._exhausted

    @property
    def next_cursor(self) -> str | None:
        return self._cursor

    def __iter__(self) -> "PaginatedSequence[T]":
        return self

    def __next__(self) -> T:
        while not self._buffer and not self._exhausted:
            self._fetch_next_page()
        if not self._buffer:
            raise StopIteration
        return self._buffer.popleft()

    def _fetch_next_page(self) -> None:
        logger.debug(
            f"Fetching page {self.pages_fetched + 1} (cursor={self._cursor}, page_size={self._page_size})"
        )
        page = self._fetch(self._cursor, self._page_size)

        self._buffer.extend(page.results)
        self._cursor = page.next_cursor
        self._exhausted = not page.has_more
        self.pages_fetched += 1
        logger.debug(f"Got {len(page.results)} items, has_more={page.has_more}")

    def collect(self) -> list[T]:
        """Consume the rest of the sequence into a list."""
        return list(self)
