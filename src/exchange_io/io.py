"""IO — request validation and response serialization stages."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jsonschema.protocols import Validator

from exchange_io.config import IOConfig
from exchange_io.exceptions import ErrorDetails, InputError, OutputError
from exchange_io.exchange import JSON_CONTENT_TYPE, Exchange, Response
from exchange_io.locals import get_locals, put_locals
from exchange_io.negotiation import negotiate
from exchange_io.pipeline import NextFn, Stage
from exchange_io.status import Status, StatusOptions, resolve
from exchange_io.validation import compile_schema, validate_resource

logger = logging.getLogger(__name__)

IO_DATA = "io.data"
IO_STATUS = "io.status"


def _is_empty(data: Any) -> bool:
    # Numbers and booleans count as empty, like collections without items.
    if data is None or isinstance(data, int | float):
        return True
    try:
        return len(data) == 0
    except TypeError:
        return False


class IO:
    """Validates requests and serializes responses around a handler.

    ``process_request()`` checks the headers, the body and the query of the
    incoming request and stores the body at ``locals.io.data`` of the
    request.  The handler puts its result on the response with
    :meth:`IO.set` (or one of the ``set_*`` shortcuts) and
    ``send_response()`` writes it out according to the stored status.

    Parameters:
        config: An :class:`IOConfig`.  Its fields may also be passed as
                keyword arguments, e.g. ``IO(req_body_schema={...})``.

    Raises:
        ConfigurationError: One of the schemas is not a valid JSON Schema.
    """

    def __init__(self, config: IOConfig | None = None, **fields: Any) -> None:
        self.config = config or IOConfig(**fields)
        self._req_body = self._compile(self.config.req_body_schema)
        self._req_query = self._compile(self.config.req_query_schema)
        self._res_body = self._compile(self.config.res_body_schema)

    @staticmethod
    def _compile(schema: Mapping[str, Any] | None) -> Validator | None:
        return compile_schema(schema) if schema is not None else None

    # ── locals accessors ─────────────────────────────────────

    @staticmethod
    def set(target: Any, data: Any, status: Any = Status.OK, path: str | None = None) -> Any:
        """Store *data* and *status* at ``locals.io`` of *target*.

        Data is replaced, never merged.  With *path*, data goes to
        ``locals.io.data.<path>`` instead.
        """
        put_locals(target, f"{IO_DATA}.{path}" if path else IO_DATA, data)
        return put_locals(target, IO_STATUS, status)

    @staticmethod
    def get(target: Any, key: str = "") -> Any:
        """Return the data at ``locals.io.data``, or below it at dotted *key*."""
        return get_locals(target, f"{IO_DATA}.{key}" if key else IO_DATA)

    @staticmethod
    def get_status(target: Any) -> Any:
        return get_locals(target, IO_STATUS)

    @staticmethod
    def set_created(target: Any, data: Any) -> Any:
        return IO.set(target, data, Status.CREATED)

    @staticmethod
    def set_empty(target: Any) -> Any:
        """Clear any data and set the status to NO_CONTENT."""
        return IO.set(target, None, Status.NO_CONTENT)

    @staticmethod
    def set_bad_request(target: Any) -> Any:
        return IO.set(target, None, Status.BAD_REQUEST)

    @staticmethod
    def set_unauthorized(target: Any) -> Any:
        return IO.set(target, None, Status.UNAUTHORIZED)

    @staticmethod
    def set_forbidden(target: Any) -> Any:
        return IO.set(target, None, Status.FORBIDDEN)

    @staticmethod
    def set_not_found(target: Any) -> Any:
        return IO.set(target, None, Status.NOT_FOUND)

    # ── response helpers ─────────────────────────────────────

    @staticmethod
    def prepare_response(response: Response) -> bool:
        """Apply the stored status code to *response*.

        Returns whether the stored data should be serialized.  A missing
        status means NO_CONTENT.

        Raises:
            ConfigurationError: The stored status cannot be resolved.
        """
        status = IO.get_status(response)
        options: StatusOptions = resolve(Status.NO_CONTENT if status is None else status)
        response.set_status(options.code)
        return options.should_serialize

    @staticmethod
    def set_response_headers(response: Response) -> Response:
        return response.set_header("Content-Type", JSON_CONTENT_TYPE)

    @staticmethod
    def validate_resource(
        resource: Any,
        schema: Mapping[str, Any] | Validator,
        location: str = "",
    ) -> ErrorDetails | None:
        return validate_resource(resource, schema, location)

    # ── validation ───────────────────────────────────────────

    def _validate_request(self, exchange: Exchange) -> None:
        request = exchange.request
        negotiate(request.headers, self.config.options.content_types)

        if self._req_body is not None:
            details = validate_resource(request.body, self._req_body, "request/body")
            if details:
                raise InputError(details.why, details)

        if self._req_query is not None:
            details = validate_resource(request.query, self._req_query, "request/query")
            if details:
                raise InputError(details.why, details)

    def _validate_response(self, data: Any) -> None:
        if self._res_body is not None:
            details = validate_resource(data, self._res_body, "response/body")
            if details:
                raise OutputError(details.why, details)

    # ── stages ───────────────────────────────────────────────

    def process_request(self) -> Stage:
        """Stage validating the request against the configured schemas.

        Requires a JSON ``Content-Type`` and an ``Accept`` header allowing
        JSON (or anything).  On success the request body is stored on the
        request with status OK.  Failures are passed on as
        :class:`InputError`.
        """

        def process_request(exchange: Exchange, call_next: NextFn) -> None:
            try:
                self._validate_request(exchange)
            except InputError as e:
                logger.debug("Request rejected: %s", e.message)
                call_next(e)
                return
            IO.set(exchange.request, exchange.request.body)
            call_next()

        return process_request

    def send_response(self, skip_next_on_success: bool = False) -> Stage:
        """Stage writing the response from the data and status on it.

        Statuses that don't serialize end the response without a body and
        without calling ``call_next``.  Otherwise the data must be present
        and, when a response schema is configured, valid; it is validated
        before anything is written.
        """

        def send_response(exchange: Exchange, call_next: NextFn) -> None:
            response = exchange.response
            try:
                if not IO.prepare_response(response):
                    response.end()
                    return

                data = IO.get(response)
                if _is_empty(data):
                    call_next(OutputError("No data to serialize"))
                    return

                self._validate_response(data)
                IO.set_response_headers(response)
                response.json(data)
            except Exception as e:
                call_next(e)
                return

            if not skip_next_on_success:
                call_next()

        return send_response
