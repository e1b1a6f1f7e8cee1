"""Error types raised by the typed Notion client.

Three failure kinds reach callers and must stay distinguishable:

- transport failures (network/IO) are raised by the transport itself and are
  never wrapped here;
- ``NotionAPIError``: the server answered with an error object;
- ``DecodeError``: the server answered with something we could not map onto
  the expected shape.
"""

from typing import Any

from notion_client import APIErrorCode


class NotionError(Exception):
    """Base class for errors produced by this library (not by the transport)."""


class NotionAPIError(NotionError):
    """Structured error object returned by the Notion API.

    Attributes:
        status: HTTP status reported in the error body.
        code: Notion error code, e.g. ``"restricted_resource"``.
        message: Human readable message from the server.
        request_id: Request ID for support, when the server sent one.
    """

    def __init__(self, status: int, code: str, message: str, request_id: str | None = None):
        self.status = status
        self.code = code
        self.message = message
        self.request_id = request_id
        super().__init__(str(self))

    def __str__(self) -> str:
        return f"Notion API Error: [{self.code}] {self.message} (Status: {self.status})"

    @property
    def error_code(self) -> APIErrorCode | None:
        """The code as a known ``APIErrorCode``, or None for codes we don't know."""
        try:
            return APIErrorCode(self.code)
        except ValueError:
            return None

    @classmethod
    def from_json(cls, obj: dict[str, Any]) -> "NotionAPIError":
        """Build the error from an ``{"object": "error", ...}`` body.

        Raises:
            DecodeError: If status/code/message are missing or mistyped.
        """
        # Imported here to keep errors.py free of decoding helpers at import time
        from notion_typed.decoding import optional_field, require_field

        return cls(
            status=require_field(obj, "status", int),
            code=require_field(obj, "code", str),
            message=require_field(obj, "message", str),
            request_id=optional_field(obj, "request_id", str),
        )


class DecodeError(NotionError, ValueError):
    """A response did not match the shape we expected.

    Attributes:
        message: What went wrong.
        path: JSON path of the offending field, e.g. ``"results[3].paragraph"``.
        status: HTTP status of the response, when known.
    """

    def __init__(self, message: str, path: str = "", status: int | None = None):
        self.message = message
        self.path = path
        self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        text = f"{self.message} at {self.path}" if self.path else self.message
        if self.status is not None:
            text = f"{text} (HTTP {self.status})"
        return text

    def with_status(self, status: int) -> "DecodeError":
        """Return a copy of this error tagged with the HTTP status."""
        return DecodeError(self.message, self.path, status)
