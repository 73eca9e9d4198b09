"""Content negotiation between the client's headers and JSON responses."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping

from exchange_io.exceptions import InputError
from exchange_io.exchange import JSON_CONTENT_TYPE

logger = logging.getLogger(__name__)

SUPPORTED_CONTENT_TYPES = (JSON_CONTENT_TYPE, "*/*", "*")

CONTENT_TYPE_MESSAGE = "Please use application-json as Content-Type header"
ACCEPT_MESSAGE = 'Client does not accept JSON responses. Did you set the correct "Accept" header?'


def parse_accept(accept: str) -> list[str]:
    """Split an ``Accept`` header into media types, dropping parameters such as ``q``."""
    return [entry.split(";", 1)[0].strip() for entry in accept.split(",")]


def negotiate(
    headers: Mapping[str, str] | None,
    extra_content_types: Iterable[str] = (),
) -> list[str]:
    """Return the content types both the client and the server accept.

    Args:
        headers: Request headers; names are matched case-insensitively.
        extra_content_types: Types to accept in addition to the client's.

    Raises:
        InputError: The request body is not declared as JSON, or no
            acceptable type overlaps with :data:`SUPPORTED_CONTENT_TYPES`.
    """
    normalized = {name.lower(): value for name, value in (headers or {}).items()}
    content_type = normalized.get("content-type") or ""
    if not normalized or JSON_CONTENT_TYPE not in content_type:
        logger.debug("Rejecting request with content type %r", content_type)
        raise InputError(CONTENT_TYPE_MESSAGE)

    declared = parse_accept(normalized.get("accept") or "")
    declared.extend(extra_content_types)

    accepted = list(dict.fromkeys(t for t in declared if t in SUPPORTED_CONTENT_TYPES))
    if not accepted:
        logger.debug("No acceptable content type among %r", declared)
        raise InputError(ACCEPT_MESSAGE + json.dumps(declared, separators=(",", ":")))
    return accepted
