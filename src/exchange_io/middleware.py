# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Terminal error handling and the async stage wrapper.

``error_middleware`` is meant to be the last error stage of a pipeline.  It
turns whatever reaches it into a JSON error envelope and never raises.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Awaitable, Callable
from typing import Any

from exchange_io.config import default_show_trace
from exchange_io.exceptions import TypedError
from exchange_io.exchange import Exchange
from exchange_io.pipeline import ErrorStage, NextFn, Stage

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server error"
DEFAULT_STATUS = 500


def error_to_json(error: BaseException) -> dict[str, Any]:
    """Convert an arbitrary exception into a JSON-serializable dict.

    Public attributes of the exception are copied when they serialize
    cleanly as plain scalars.
    """
    body: dict[str, Any] = {
        "name": type(error).__name__,
        "message": str(error),
    }
    for key, value in vars(error).items():
        if not key.startswith("_") and isinstance(value, str | int | float | bool | type(None)):
            body.setdefault(key, value)
    body["stack"] = "".join(traceback.format_exception(error)).rstrip()
    return body


def _minimal(body: dict[str, Any], error: BaseException) -> dict[str, Any]:
    return {
        "name": body.get("name") or type(error).__name__,
        "message": body.get("message") or str(error),
    }


def _status_of(error: BaseException) -> int:
    for attr in ("status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return DEFAULT_STATUS


def _log(status: int, error: BaseException) -> None:
    if status >= 500:
        logger.error("Request failed with %d: %s", status, type(error).__name__, exc_info=error)
    else:
        logger.warning("Request failed with %d: %s", status, type(error).__name__)


def _format(error: Exception, show_trace: bool) -> tuple[int, dict[str, Any]]:
    if isinstance(error, TypedError):
        return error.status, error.to_json(show_trace)

    to_json = getattr(error, "to_json", None)
    if callable(to_json):
        body = dict(to_json())
        return _status_of(error), body if show_trace else _minimal(body, error)

    body = error_to_json(error)
    return DEFAULT_STATUS, body if show_trace else _minimal(body, error)


def error_middleware(show_trace: bool | None = None) -> ErrorStage:
    """Build the terminal error stage.

    Args:
        show_trace: Include stack traces in error responses.  Defaults to
            the ``EXCHANGE_IO_SHOW_TRACE`` environment variable, or ``True``.
    """
    if show_trace is None:
        show_trace = default_show_trace()

    def handle_error(error: Exception, exchange: Exchange, call_next: NextFn) -> None:
        response = exchange.response
        if response.headers_sent:
            call_next(error)
            return

        try:
            status, body = _format(error, show_trace)
            _log(status, error)
            response.set_status(status)
            response.json(body)
        except Exception as secondary:
            logger.exception("Failed to format %s", type(error).__name__)
            try:
                trace = error_to_json(secondary)
                if not show_trace:
                    trace = _minimal(trace, secondary)
                response.set_status(DEFAULT_STATUS)
                response.json({"error": SERVER_ERROR, "trace": trace})
            except Exception:
                logger.exception("Failed to write the fallback error response")
                call_next(error)

    return handle_error


def async_middleware(fn: Callable[[Exchange], Awaitable[Any]]) -> Stage:
    """Wrap a coroutine handler as a stage.

    The handler receives the exchange only.  Its failure is passed to
    ``call_next(err)``; on success the chain continues.
    """

    async def stage(exchange: Exchange, call_next: NextFn) -> None:
        try:
            await fn(exchange)
        except Exception as e:
            call_next(e)
            return
        call_next()

    stage.__qualname__ = getattr(fn, "__qualname__", stage.__qualname__)
    return stage
