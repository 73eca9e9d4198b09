# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Starlette adapter for running a Pipeline as a route endpoint.

Usage:
    io = IO(req_body_schema=..., res_body_schema=...)
    pipeline = (
        Pipeline()
        .use(io.process_request(), async_middleware(create_item), io.send_response())
        .use_error(error_middleware(show_trace=False))
    )
    app = Starlette(routes=[Route("/items", endpoint(pipeline), methods=["POST"])])

Errors the pipeline does not handle propagate to Starlette, which answers
them with its own 500 response.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from exchange_io.exchange import Exchange, Request, Response
from exchange_io.pipeline import Pipeline

try:
    from starlette.requests import Request as StarletteRequest
    from starlette.responses import Response as StarletteResponse

    _STARLETTE_AVAILABLE = True
except ImportError:
    _STARLETTE_AVAILABLE = False

logger = logging.getLogger(__name__)

NOT_FOUND = 404


def _decode_body(raw: bytes) -> Any:
    if not raw:
        return None
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except ValueError:
        # Left to the body schema to reject.
        return text


async def to_exchange(request: StarletteRequest) -> Exchange:
    """Build an :class:`Exchange` from a Starlette request."""
    return Exchange(
        request=Request(
            headers=dict(request.headers),
            body=_decode_body(await request.body()),
            query=dict(request.query_params),
            method=request.method,
            path=request.url.path,
        ),
        response=Response(),
    )


def to_starlette(response: Response) -> StarletteResponse:
    """Convert a committed :class:`Response` into a Starlette response.

    A response nothing committed becomes an empty 404.
    """
    if not response.headers_sent:
        logger.warning("Pipeline finished without sending a response")
        return StarletteResponse(status_code=NOT_FOUND)
    return StarletteResponse(
        content=response.body,
        status_code=response.status_code,
        headers=response.headers,
    )


def endpoint(pipeline: Pipeline) -> Callable[[StarletteRequest], Awaitable[StarletteResponse]]:
    """Return a Starlette request/response endpoint running *pipeline*.

    Raises:
        RuntimeError: If starlette is not installed.  Install with
            ``pip install exchange-io[starlette]``.
    """
    if not _STARLETTE_AVAILABLE:
        raise RuntimeError(
            "starlette is required for the ASGI adapter. "
            "Install with: pip install exchange-io[starlette]"
        )

    async def run_pipeline(request: StarletteRequest) -> StarletteResponse:
        exchange = await to_exchange(request)
        await pipeline.run(exchange)
        return to_starlette(exchange.response)

    return run_pipeline
