"""Request, Response and Exchange — the per-call objects stages work on.

These are deliberately framework-neutral.  A host adapter (see
:mod:`exchange_io.asgi`) fills a :class:`Request` from its own request type
and turns the finished :class:`Response` back into one of its responses.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from exchange_io.exceptions import ExchangeIOError

JSON_CONTENT_TYPE = "application/json"


class HeadersSentError(ExchangeIOError, RuntimeError):
    """Raised when a response is written after its headers were committed."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Cannot {operation} after headers are sent")


@dataclass
class Request:
    """Inbound half of an exchange.

    Attributes:
        headers: Request headers.  Names are lower-cased on construction.
        body:    Decoded request body (usually parsed JSON), or ``None``.
        query:   Query parameters.
        method:  HTTP method.
        path:    Request path.
        locals:  Scratch space shared by stages (see :mod:`exchange_io.locals`).
    """

    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    query: dict[str, Any] = field(default_factory=dict)
    method: str = "GET"
    path: str = "/"
    locals: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    def get_header(self, name: str, default: str | None = None) -> str | None:
        return self.headers.get(name.lower(), default)


@dataclass
class Response:
    """Outbound half of an exchange.

    The response commits once :meth:`json` or :meth:`end` is called; after
    that ``headers_sent`` is ``True`` and further writes raise
    :class:`HeadersSentError`.
    """

    status_code: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    headers_sent: bool = False
    locals: dict[str, Any] = field(default_factory=dict)

    def set_status(self, code: int) -> Response:
        if self.headers_sent:
            raise HeadersSentError("set status")
        self.status_code = code
        return self

    def set_header(self, name: str, value: str) -> Response:
        if self.headers_sent:
            raise HeadersSentError("set headers")
        self.headers[name.lower()] = value
        return self

    def get_header(self, name: str) -> str | None:
        return self.headers.get(name.lower())

    def json(self, data: Any) -> Response:
        """Serialize *data* as the JSON body and commit the response."""
        payload = json.dumps(data).encode("utf-8")
        self.set_header("Content-Type", JSON_CONTENT_TYPE)
        self.body = payload
        self.headers_sent = True
        return self

    def end(self) -> Response:
        """Commit the response without a body."""
        if self.headers_sent:
            raise HeadersSentError("end response")
        self.headers_sent = True
        return self


@dataclass
class Exchange:
    """One request/response pair travelling through a :class:`Pipeline`."""

    request: Request = field(default_factory=Request)
    response: Response = field(default_factory=Response)
