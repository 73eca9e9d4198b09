"""Pipeline — runs stages over an exchange in registration order."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from exchange_io.exchange import Exchange

logger = logging.getLogger(__name__)

NextFn = Callable[..., None]
Stage = Callable[[Exchange, NextFn], Awaitable[None] | None]
ErrorStage = Callable[[Exception, Exchange, NextFn], Awaitable[None] | None]


class Continuation:
    """The ``call_next`` handed to a stage.

    Calling it with no argument advances to the next regular stage; calling
    it with an exception skips ahead to the next error stage.  Only the
    first call counts.
    """

    def __init__(self, stage_name: str) -> None:
        self._stage_name = stage_name
        self.called = False
        self.error: Exception | None = None

    def __call__(self, err: Exception | None = None) -> None:
        if self.called:
            logger.warning("Stage %s called next more than once", self._stage_name)
            return
        self.called = True
        self.error = err


@dataclass(frozen=True)
class _Layer:
    fn: Callable[..., Any]
    handles_errors: bool

    @property
    def name(self) -> str:
        return getattr(self.fn, "__qualname__", repr(self.fn))


class Pipeline:
    """Holds an ordered chain of stages and runs them against an exchange.

    A stage has the signature ``(exchange, call_next)`` and may be sync or
    async.  Error stages, registered with :meth:`use_error`, have the
    signature ``(err, exchange, call_next)`` and only run while an error is
    pending.

    * A stage that returns without calling ``call_next`` ends the chain.
    * ``call_next(err)`` skips to the next error stage.
    * An exception raised synchronously by a stage is treated like
      ``call_next(err)``.  Exceptions escaping an awaited coroutine are not
      intercepted; wrap such stages with
      :func:`~exchange_io.middleware.async_middleware`.
    * An error still pending after the last stage is re-raised to the host.
    """

    def __init__(self) -> None:
        self._layers: list[_Layer] = []

    # ── registration ─────────────────────────────────────────

    def use(self, *stages: Stage) -> Pipeline:
        """Append regular stages to the chain."""
        self._layers.extend(_Layer(stage, handles_errors=False) for stage in stages)
        return self

    def use_error(self, *handlers: ErrorStage) -> Pipeline:
        """Append error stages to the chain."""
        self._layers.extend(_Layer(handler, handles_errors=True) for handler in handlers)
        return self

    # ── evaluation ───────────────────────────────────────────

    async def run(self, exchange: Exchange) -> Exchange:
        """Run the chain for *exchange* and return it.

        Raises:
            Exception: the error still pending when the chain ran out of
                error stages.
        """
        error: Exception | None = None
        for layer in self._layers:
            if layer.handles_errors != (error is not None):
                continue

            call_next = Continuation(layer.name)
            try:
                if layer.handles_errors:
                    result = layer.fn(error, exchange, call_next)
                else:
                    result = layer.fn(exchange, call_next)
            except Exception as e:
                logger.debug("Stage %s raised %s", layer.name, type(e).__name__)
                error = e
                continue

            if inspect.isawaitable(result):
                await result

            if not call_next.called:
                return exchange
            error = call_next.error

        if error is not None:
            raise error
        return exchange

    # ── introspection ────────────────────────────────────────

    def list_stages(self) -> list[str]:
        """Return the names of all registered stages in chain order."""
        return [layer.name for layer in self._layers]
