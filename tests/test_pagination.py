"""Tests for notion_typed.pagination module."""

import pytest

from notion_typed import DecodeError, ListResponse, PaginatedSequence


def decode_str(item, path):
    if not isinstance(item, str):
        raise DecodeError("Expected string", path)
    return item


class RecordingFetch:
    """Fetch function serving canned pages and recording its arguments."""

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def __call__(self, cursor, page_size):
        self.calls.append((cursor, page_size))
        page = self.pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return page


class TestListResponse:
    """Tests for the list envelope."""

    def test_decode(self):
        response = ListResponse.from_json(
            {"object": "list", "results": ["a", "b"], "next_cursor": "c1", "has_more": True}, decode_str
        )
        assert response.results == ("a", "b")
        assert response.next_cursor == "c1"
        assert response.has_more is True
        assert list(response) == ["a", "b"]
        assert len(response) == 2

    def test_no_more_drops_cursor(self):
        """has_more false forces the cursor to None whatever the wire says."""
        response = ListResponse.from_json(
            {"object": "list", "results": [], "next_cursor": "stale", "has_more": False}, decode_str
        )
        assert response.next_cursor is None

    def test_more_without_cursor(self):
        with pytest.raises(DecodeError) as exc:
            ListResponse.from_json(
                {"object": "list", "results": [], "next_cursor": None, "has_more": True}, decode_str
            )
        assert exc.value.path == "next_cursor"

    def test_item_error_path(self):
        with pytest.raises(DecodeError) as exc:
            ListResponse.from_json(
                {"object": "list", "results": ["a", 3], "next_cursor": None, "has_more": False}, decode_str
            )
        assert exc.value.path == "results[1]"

    def test_not_a_list(self):
        with pytest.raises(DecodeError):
            ListResponse.from_json({"object": "page"}, decode_str)

    def test_constructor_invariants(self):
        assert ListResponse(("a",), next_cursor="x", has_more=False).next_cursor is None
        with pytest.raises(ValueError):
            ListResponse((), has_more=True)

    def test_encode(self):
        response = ListResponse(("a",), next_cursor="c", has_more=True)
        assert response.to_json(str.upper) == {
            "object": "list",
            "results": ["A"],
            "next_cursor": "c",
            "has_more": True,
        }


class TestPaginatedSequence:
    """Tests for the lazy cursor-driven sequence."""

    def test_two_pages(self):
        """[A, B] then [C] yields A, B, C with exactly two fetches."""
        fetch = RecordingFetch(
            [
                ListResponse(("A", "B"), next_cursor="c1", has_more=True),
                ListResponse(("C",), has_more=False),
            ]
        )
        sequence = PaginatedSequence(fetch, page_size=2)
        assert list(sequence) == ["A", "B", "C"]
        assert fetch.calls == [(None, 2), ("c1", 2)]
        assert sequence.pages_fetched == 2

    def test_lazy(self):
        """Nothing is fetched until the first item is requested."""
        fetch = RecordingFetch([ListResponse(("A", "B"), next_cursor="c1", has_more=True)])
        sequence = PaginatedSequence(fetch)
        assert fetch.calls == []
        assert next(sequence) == "A"
        assert next(sequence) == "B"
        assert fetch.calls == [(None, None)]

    def test_exhausted_stays_exhausted(self):
        fetch = RecordingFetch([ListResponse(("A",))])
        sequence = PaginatedSequence(fetch)
        assert list(sequence) == ["A"]
        for _ in range(3):
            with pytest.raises(StopIteration):
                next(sequence)
        assert len(fetch.calls) == 1
        assert sequence.exhausted is True

    def test_empty_first_page(self):
        fetch = RecordingFetch([ListResponse(())])
        assert list(PaginatedSequence(fetch)) == []
        assert len(fetch.calls) == 1

    def test_empty_page_with_more(self):
        """An empty page that still has more is skipped over."""
        fetch = RecordingFetch(
            [
                ListResponse((), next_cursor="c1", has_more=True),
                ListResponse(("A",)),
            ]
        )
        assert list(PaginatedSequence(fetch)) == ["A"]
        assert fetch.calls == [(None, None), ("c1", None)]

    def test_not_restartable(self):
        fetch = RecordingFetch([ListResponse(("A", "B"))])
        sequence = PaginatedSequence(fetch)
        assert iter(sequence) is sequence
        assert next(iter(sequence)) == "A"
        assert list(sequence) == ["B"]
        assert list(sequence) == []

    def test_failed_fetch_leaves_state(self):
        """A failed fetch can be retried from the same cursor."""
        fetch = RecordingFetch(
            [
                ListResponse(("A",), next_cursor="c1", has_more=True),
                ConnectionError("offline"),
                ListResponse(("B",)),
            ]
        )
        sequence = PaginatedSequence(fetch, page_size=1)
        assert next(sequence) == "A"
        with pytest.raises(ConnectionError):
            next(sequence)
        assert sequence.next_cursor == "c1"
        assert sequence.pages_fetched == 1
        assert next(sequence) == "B"
        assert fetch.calls == [(None, 1), ("c1", 1), ("c1", 1)]

    def test_collect(self):
        fetch = RecordingFetch([ListResponse(("A", "B"))])
        assert PaginatedSequence(fetch).collect() == ["A", "B"]
