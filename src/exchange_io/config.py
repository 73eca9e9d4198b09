"""Configuration models for the IO pipeline.

Schemas are plain JSON Schema documents (``dict``); they are compiled when
an :class:`~exchange_io.io.IO` instance is built.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SHOW_TRACE_ENV = "EXCHANGE_IO_SHOW_TRACE"

_FALSY = {"0", "false", "no", "off"}


class IOOptions(BaseModel):
    """Extra negotiation options.

    Attributes:
        content_types: Content types to accept in addition to whatever the
            client lists in its ``Accept`` header.
    """

    content_types: list[str] = Field(default_factory=list)


class IOConfig(BaseModel):
    """Per-instance configuration of :class:`~exchange_io.io.IO`.

    Attributes:
        req_body_schema:  Schema the request body must satisfy.
        req_query_schema: Schema the query parameters must satisfy.
        res_body_schema:  Schema the serialized response must satisfy.
        options:          Negotiation options.
    """

    model_config = ConfigDict(extra="forbid")

    req_body_schema: dict[str, Any] | None = None
    req_query_schema: dict[str, Any] | None = None
    res_body_schema: dict[str, Any] | None = None
    options: IOOptions = Field(default_factory=IOOptions)


def default_show_trace() -> bool:
    """Whether error responses include traces, from ``EXCHANGE_IO_SHOW_TRACE``.

    Defaults to ``True`` when the variable is unset.
    """
    value = os.getenv(SHOW_TRACE_ENV, "")
    if not value:
        return True
    return value.strip().lower() not in _FALSY
