"""Response statuses and the table mapping them to HTTP codes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from exchange_io.exceptions import ConfigurationError


class Status(str, Enum):
    """Disposition of a response, as stored at ``locals.io.status``."""

    OK = "ok"
    CREATED = "created"
    NO_CONTENT = "no-content"
    BAD_REQUEST = "bad-request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not-found"


@dataclass(frozen=True)
class StatusOptions:
    """HTTP code for a status and whether its data is serialized as JSON."""

    code: int
    should_serialize: bool = False


STATUS_OPTIONS: Mapping[Status, StatusOptions] = MappingProxyType(
    {
        Status.OK: StatusOptions(200, should_serialize=True),
        Status.CREATED: StatusOptions(201, should_serialize=True),
        Status.NO_CONTENT: StatusOptions(204),
        Status.BAD_REQUEST: StatusOptions(400),
        Status.UNAUTHORIZED: StatusOptions(401),
        Status.FORBIDDEN: StatusOptions(403),
        Status.NOT_FOUND: StatusOptions(404),
    }
)

# "shouldSerialize" is accepted as an alias of "should_serialize".
_OVERRIDE_KEYS = frozenset({"code", "should_serialize", "shouldSerialize"})


def resolve(status: Any) -> StatusOptions:
    """Look up the options for *status*.

    Besides members of :class:`Status` (or their string values), an ad-hoc
    override is accepted: a :class:`StatusOptions` instance or a mapping
    ``{"code": int, "should_serialize": bool}`` where the flag is optional.

    Raises:
        ConfigurationError: *status* is neither a known status nor a
            well-formed override.
    """
    if isinstance(status, StatusOptions):
        return status

    if isinstance(status, str):
        try:
            return STATUS_OPTIONS[Status(status)]
        except ValueError:
            raise ConfigurationError("status", f"unknown status {status!r}") from None

    if isinstance(status, Mapping):
        unknown = sorted(str(key) for key in status if key not in _OVERRIDE_KEYS)
        if unknown:
            raise ConfigurationError("status", f"unknown override keys {unknown}")
        code = status.get("code")
        if not isinstance(code, int) or isinstance(code, bool):
            raise ConfigurationError("status", f"override needs an integer 'code', got {status!r}")
        should_serialize = status.get("should_serialize", status.get("shouldSerialize", False))
        return StatusOptions(code, should_serialize=bool(should_serialize))

    raise ConfigurationError("status", f"unsupported status value {status!r}")
