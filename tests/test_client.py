"""Tests for notion_typed.client module (with a fake transport)."""

import pytest
from notion_client import APIErrorCode

from notion_typed import (
    Block,
    DecodeError,
    NotionAPIError,
    NotionClient,
    NotionError,
    NotionSDKTransport,
    Page,
    PageProperty,
    Parent,
    User,
    get_notion_client,
    paragraph,
)
from notion_typed.client import NOTION_VERSION

from .conftest import error_json, list_json, page_json, paragraph_json, user_json


RESTRICTED = error_json(403, "restricted_resource", "Insufficient permissions", request_id="abc-123")


class TestErrorResponses:
    """Error-shaped bodies surface as NotionAPIError for every call."""

    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.get_page("p1"),
            lambda c: c.get_users(),
            lambda c: c.get_block_children("b1"),
            lambda c: c.query_database("db1"),
            lambda c: c.append_block_children("b1", [paragraph("x")]),
            lambda c: c.delete_block("b1"),
            lambda c: c.create_page(Parent.page("p1"), title="x"),
            lambda c: next(c.block_children("b1")),
        ],
    )
    def test_restricted_resource(self, client, transport, call):
        transport.queue(RESTRICTED, status=403)
        with pytest.raises(NotionAPIError) as exc:
            call(client)
        error = exc.value
        assert error.status == 403
        assert error.code == "restricted_resource"
        assert error.request_id == "abc-123"
        assert error.error_code is APIErrorCode.RestrictedResource
        assert str(error) == "Notion API Error: [restricted_resource] Insufficient permissions (Status: 403)"

    def test_error_object_with_success_status(self, client, transport):
        """The body decides, not the status code."""
        transport.queue(error_json(404, "object_not_found", "Not found"), status=200)
        with pytest.raises(NotionAPIError) as exc:
            client.get_page("p1")
        assert exc.value.status == 404
        assert exc.value.request_id is None

    def test_unknown_error_code(self, client, transport):
        transport.queue(error_json(418, "teapot", "No coffee"), status=418)
        with pytest.raises(NotionAPIError) as exc:
            client.get_page("p1")
        assert exc.value.error_code is None

    def test_malformed_error_object(self, client, transport):
        transport.queue({"object": "error", "code": "x"}, status=500)
        with pytest.raises(DecodeError) as exc:
            client.get_page("p1")
        assert exc.value.status == 500

    def test_non_json_body(self, client, transport):
        transport.queue(b"<html>Bad Gateway</html>", status=502)
        with pytest.raises(DecodeError) as exc:
            client.get_page("p1")
        assert exc.value.status == 502

    def test_error_status_without_error_object(self, client, transport):
        transport.queue(page_json(), status=500)
        with pytest.raises(DecodeError):
            client.get_page("p1")

    def test_wrong_shape_is_decode_error(self, client, transport):
        transport.queue(list_json([]))
        with pytest.raises(DecodeError) as exc:
            client.get_page("p1")
        assert exc.value.status == 200
        assert isinstance(exc.value, NotionError)

    def test_number_out_of_float_range_is_decode_error(self, client, transport):
        transport.queue(b'{"object": "page", "id": "p1", "n": 1e400}')
        with pytest.raises(DecodeError) as exc:
            client.get_page("p1")
        assert exc.value.status == 200
        assert isinstance(exc.value, NotionError)

    def test_transport_errors_propagate_unchanged(self, client, transport):
        transport.queue(ConnectionError("offline"))
        with pytest.raises(ConnectionError):
            client.get_page("p1")


class TestReads:
    """Tests for read operations."""

    def test_get_page(self, client, transport):
        transport.queue(page_json("p1", title="Diary"))
        page = client.get_page("p1")
        assert isinstance(page, Page)
        assert page.title == "Diary"
        request = transport.calls[0]
        assert (request.method, request.path, request.query, request.body) == ("GET", "pages/p1", None, None)

    def test_get_users_query(self, client, transport):
        transport.queue(list_json([user_json()]))
        response = client.get_users(start_cursor="c1", page_size=10)
        assert isinstance(response.results[0], User)
        assert transport.calls[0].query == {"start_cursor": "c1", "page_size": "10"}

    def test_users_sequence(self, client, transport):
        transport.queue(list_json([user_json("u1")], next_cursor="c1", has_more=True))
        transport.queue(list_json([user_json("u2")]))
        assert [user.id for user in client.users(page_size=1)] == ["u1", "u2"]
        assert transport.calls[1].query == {"start_cursor": "c1", "page_size": "1"}

    def test_block_children_two_pages(self, client, transport):
        """Items from both pages in order, exactly two requests, second with the cursor."""
        transport.queue(list_json([paragraph_json("A", "a"), paragraph_json("B", "b")], next_cursor="c1", has_more=True))
        transport.queue(list_json([paragraph_json("C", "c")]))
        blocks = list(client.block_children("page-1"))
        assert [block.id for block in blocks] == ["a", "b", "c"]
        assert len(transport.calls) == 2
        assert transport.calls[0].path == "blocks/page-1/children"
        assert transport.calls[0].query is None
        assert transport.calls[1].query == {"start_cursor": "c1"}

    def test_query_database_body(self, client, transport):
        transport.queue(list_json([page_json("row")]))
        filter = {"property": "Done", "checkbox": {"equals": True}}
        sorts = [{"property": "Name", "direction": "ascending"}]
        response = client.query_database("db1", filter=filter, sorts=sorts, page_size=50)
        assert response.results[0].id == "row"
        request = transport.calls[0]
        assert (request.method, request.path) == ("POST", "databases/db1/query")
        assert request.body == {"filter": filter, "sorts": sorts, "page_size": 50}

    def test_database_pages_follows_cursor(self, client, transport):
        transport.queue(list_json([page_json("r1")], next_cursor="c1", has_more=True))
        transport.queue(list_json([page_json("r2")]))
        rows = list(client.database_pages("db1"))
        assert [row.id for row in rows] == ["r1", "r2"]
        assert transport.calls[1].body == {"start_cursor": "c1"}


class TestWrites:
    """Tests for write operations."""

    def test_append_paragraph(self, client, transport):
        transport.queue(list_json([paragraph_json("Hi", "new")]))
        result = client.append_block_children("page-1", [paragraph("Hi")])
        assert [block.id for block in result.results] == ["new"]

        request = transport.calls[0]
        assert (request.method, request.path) == ("PATCH", "blocks/page-1/children")
        [sent] = request.body["children"]
        assert sent["type"] == "paragraph"
        assert sent["paragraph"]["rich_text"][0]["text"]["content"] == "Hi"
        block_kinds = {"paragraph", "heading_1", "heading_2", "heading_3", "to_do", "toggle", "code"}
        assert block_kinds & set(sent) == {"paragraph"}
        assert "after" not in request.body

    def test_append_after(self, client, transport):
        transport.queue(list_json([]))
        client.append_block_children("page-1", [paragraph("x")], after="b9")
        assert transport.calls[0].body["after"] == "b9"

    def test_append_child_page_rejected_before_sending(self, client, transport):
        child_page = Block.from_json(
            {"object": "block", "type": "child_page", "child_page": {"title": "x"}}
        )
        with pytest.raises(ValueError):
            client.append_block_children("page-1", [child_page])
        assert transport.calls == []

    def test_delete_block(self, client, transport):
        transport.queue(paragraph_json("gone", "b1", archived=True))
        assert client.delete_block("b1") is None
        assert (transport.calls[0].method, transport.calls[0].path) == ("DELETE", "blocks/b1")

    def test_create_page(self, client, transport):
        transport.queue(page_json("new", title="March"))
        page = client.create_page(
            Parent.page("parent"),
            title="March",
            properties={"Count": PageProperty.number(3)},
            children=[paragraph("first")],
        )
        assert page.title == "March"
        body = transport.calls[0].body
        assert body["parent"] == {"type": "page_id", "page_id": "parent"}
        assert body["properties"]["title"] == {"title": [{"type": "text", "text": {"content": "March"}}]}
        assert body["properties"]["Count"] == {"number": 3}
        assert body["children"][0]["type"] == "paragraph"


class FakeHTTPResponse:
    def __init__(self, status_code, content):
        self.status_code = status_code
        self.content = content


class FakeHTTPClient:
    def __init__(self):
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        return FakeHTTPResponse(200, b"{}")


class FakeSDK:
    def __init__(self):
        self.client = FakeHTTPClient()


class TestSDKTransport:
    """Tests for NotionSDKTransport."""

    def test_send_uses_sdk_http_client(self):
        sdk = FakeSDK()
        transport = NotionSDKTransport(sdk)
        status, data = transport.send("PATCH", "blocks/b1/children", {"page_size": "5"}, b'{"children":[]}')
        assert (status, data) == (200, b"{}")
        method, url, kwargs = sdk.client.requests[0]
        assert (method, url) == ("PATCH", "blocks/b1/children")
        assert kwargs["params"] == {"page_size": "5"}
        assert kwargs["content"] == b'{"children":[]}'
        assert kwargs["headers"] == {"Content-Type": "application/json"}
        assert transport.request_count == 1

    def test_get_without_body(self):
        sdk = FakeSDK()
        NotionSDKTransport(sdk).send("GET", "users")
        _, _, kwargs = sdk.client.requests[0]
        assert kwargs["params"] is None
        assert kwargs["content"] is None
        assert kwargs["headers"] == {}


class TestFactory:
    """Tests for get_notion_client()."""

    def test_missing_token(self, monkeypatch):
        monkeypatch.setattr("notion_typed.utils._env_loaded", True)
        monkeypatch.delenv("NOTION_API_TOKEN", raising=False)
        with pytest.raises(ValueError, match="NOTION_API_TOKEN"):
            get_notion_client()

    def test_builds_sdk_transport(self, monkeypatch):
        monkeypatch.setattr("notion_typed.utils._env_loaded", True)
        monkeypatch.setenv("NOTION_API_TOKEN", "secret_test")
        monkeypatch.delenv("NOTION_VERSION", raising=False)
        client = get_notion_client()
        assert isinstance(client, NotionClient)
        assert isinstance(client.transport, NotionSDKTransport)
        assert client.transport.notion.client.headers["Notion-Version"] == NOTION_VERSION
