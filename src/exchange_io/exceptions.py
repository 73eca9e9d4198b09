"""Custom exceptions for the exchange_io package.

Typed errors share a single carrier, :class:`TypedError`, tagged with an
:class:`ErrorKind`.  The thin subclasses below only bind a kind so callers
can raise and catch them by name.
"""

from __future__ import annotations

import traceback
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict


class ExchangeIOError(Exception):
    """Base exception for all exchange_io errors."""


class ConfigurationError(ExchangeIOError):
    """Raised when the pipeline is given a value it cannot work with."""

    def __init__(self, subject: str, message: str) -> None:
        self.subject = subject
        super().__init__(f"Invalid {subject}: {message}")


class ErrorDetails(BaseModel):
    """Description of a schema validation failure.

    Attributes:
        why:   Intent of the failed check.
        where: Location of the failure, e.g. ``request/body/objectProperty``.
        how:   The rule that was violated.
    """

    model_config = ConfigDict(frozen=True)

    why: str
    where: str
    how: str


class ErrorKind(Enum):
    """Closed set of typed error kinds, each bound to ``(status, title)``."""

    INPUT = (400, "InputError")
    OUTPUT = (500, "OutputError")
    NOT_FOUND = (404, "Not Found")
    FORBIDDEN = (403, "Forbidden")
    BAD_REQUEST = (400, "Bad request")
    CONFLICT = (409, "Conflict")

    def __init__(self, status: int, title: str) -> None:
        self.status = status
        self.title = title


class TypedError(ExchangeIOError):
    """An error with a fixed HTTP status, a title, and a JSON projection.

    Subclasses set ``kind``.  Custom errors may instead pass ``status`` and
    ``title`` explicitly::

        class PaymentRequiredError(TypedError):
            def __init__(self, message: str) -> None:
                super().__init__(message, status=402, title="Payment required")
    """

    kind: ClassVar[ErrorKind | None] = None

    def __init__(
        self,
        message: str,
        details: ErrorDetails | None = None,
        *,
        status: int | None = None,
        title: str | None = None,
    ) -> None:
        if self.kind is not None:
            status = self.kind.status if status is None else status
            title = self.kind.title if title is None else title
        if status is None or title is None:
            raise ConfigurationError("typed error", "status and title are required")
        self.message = message
        self.details = details
        self.status = status
        self.title = title
        super().__init__(message)

    @property
    def trace(self) -> str:
        """Formatted traceback, or just the error line if it was never raised."""
        return "".join(traceback.format_exception(self)).rstrip()

    def to_json(self, show_trace: bool = False) -> dict[str, Any]:
        return error_json(self, show_trace)


class InputError(TypedError):
    """Raised when a request is malformed or unacceptable."""

    kind = ErrorKind.INPUT


class OutputError(TypedError):
    """Raised when a handler produced an invalid or absent response."""

    kind = ErrorKind.OUTPUT


class NotFoundError(TypedError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ForbiddenError(TypedError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str) -> None:
        super().__init__(message)


class BadRequestError(TypedError):
    kind = ErrorKind.BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConflictError(TypedError):
    kind = ErrorKind.CONFLICT

    def __init__(self, message: str) -> None:
        super().__init__(message)


def error_json(error: TypedError, show_trace: bool = False) -> dict[str, Any]:
    """Project a typed error onto the JSON error envelope.

    ``details`` is only present when the error carries them; ``meta`` is
    always present and ``None`` unless ``show_trace`` is set.
    """
    body: dict[str, Any] = {
        "status": error.status,
        "title": error.title,
        "message": error.message,
    }
    if error.details is not None:
        body["details"] = error.details.model_dump()
    body["meta"] = {"trace": error.trace} if show_trace else None
    return body
