"""JSON Schema validation of request and response payloads.

``jsonschema`` is treated as an opaque engine; this module only turns its
first failure into an :class:`~exchange_io.exceptions.ErrorDetails`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import jsonschema
from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator

from exchange_io.exceptions import ConfigurationError, ErrorDetails

SCHEMA_MISMATCH = "Resource does not respect the schema"


def compile_schema(schema: Mapping[str, Any]) -> Validator:
    """Build a validator for *schema*, checking the schema itself first.

    The draft is picked from ``$schema``; schemas without one use the latest
    draft ``jsonschema`` ships.

    Raises:
        ConfigurationError: *schema* is not a valid JSON Schema.
    """
    cls = jsonschema.validators.validator_for(schema)
    try:
        cls.check_schema(schema)
    except SchemaError as e:
        raise ConfigurationError("schema", e.message) from e
    return cls(schema)


def _pointer(path: Any) -> str:
    # RFC 6901 escaping: "~" first, then "/".
    return "".join("/" + str(part).replace("~", "~0").replace("/", "~1") for part in path)


def _describe(error: jsonschema.ValidationError) -> str:
    if error.context:
        messages = ",".join(sub.message for sub in error.context)
        return f"It can be any of these errors [{messages}]"
    return error.message


def validate_resource(
    resource: Any,
    schema: Mapping[str, Any] | Validator,
    location: str = "",
) -> ErrorDetails | None:
    """Validate *resource* against *schema*.

    Args:
        resource: The payload to check.
        schema:   A schema mapping or a validator from :func:`compile_schema`.
        location: Prefix for ``where``, e.g. ``"request/body"``.

    Returns:
        ``None`` when *resource* is valid, otherwise the details of the
        first failure.
    """
    validator = compile_schema(schema) if isinstance(schema, Mapping) else schema
    error = next(iter(validator.iter_errors(resource)), None)
    if error is None:
        return None
    return ErrorDetails(
        why=SCHEMA_MISMATCH,
        where=f"{location}{_pointer(error.absolute_path)}",
        how=_describe(error),
    )
