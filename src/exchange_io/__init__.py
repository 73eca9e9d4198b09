"""exchange_io — request validation and response serialization stages.

Stages run in registration order over a request/response exchange.  The
request is validated on the way in, the handler's result is serialized on
the way out, and every failure ends up as a JSON error envelope.
"""

from exchange_io.config import IOConfig, IOOptions
from exchange_io.exceptions import (
    BadRequestError,
    ConfigurationError,
    ConflictError,
    ErrorDetails,
    ErrorKind,
    ExchangeIOError,
    ForbiddenError,
    InputError,
    NotFoundError,
    OutputError,
    TypedError,
)
from exchange_io.exchange import Exchange, HeadersSentError, Request, Response
from exchange_io.io import IO
from exchange_io.locals import UNSET, get_locals, set_locals
from exchange_io.middleware import async_middleware, error_middleware, error_to_json
from exchange_io.pipeline import Pipeline
from exchange_io.status import STATUS_OPTIONS, Status, StatusOptions, resolve

__all__ = [
    "IO",
    "STATUS_OPTIONS",
    "UNSET",
    "BadRequestError",
    "ConfigurationError",
    "ConflictError",
    "ErrorDetails",
    "ErrorKind",
    "Exchange",
    "ExchangeIOError",
    "ForbiddenError",
    "HeadersSentError",
    "IOConfig",
    "IOOptions",
    "InputError",
    "NotFoundError",
    "OutputError",
    "Pipeline",
    "Request",
    "Response",
    "Status",
    "StatusOptions",
    "TypedError",
    "async_middleware",
    "error_middleware",
    "error_to_json",
    "get_locals",
    "resolve",
    "set_locals",
]
