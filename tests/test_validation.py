"""Tests for the JSON Schema adapter."""

import pytest

from exchange_io import ConfigurationError, ErrorDetails
from exchange_io.validation import SCHEMA_MISMATCH, compile_schema, validate_resource

AB_SCHEMA = {
    "type": "object",
    "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
    "required": ["a", "b"],
}


def test_valid_resource_returns_none():
    assert validate_resource({"a": "x", "b": "y"}, AB_SCHEMA) is None


def test_missing_property_is_named():
    details = validate_resource({"a": "x"}, AB_SCHEMA)
    assert isinstance(details, ErrorDetails)
    assert details.why == SCHEMA_MISMATCH
    assert details.where == ""
    assert "'b'" in details.how
    assert "required" in details.how


def test_where_points_at_nested_failure(req_body_schema):
    details = validate_resource(
        {"firstProperty": "abc", "objectProperty": {}},
        req_body_schema,
        "request/body",
    )
    assert details.where == "request/body/objectProperty"
    assert details.how == "'nestedProperty' is a required property"


def test_sub_errors_are_enumerated():
    schema = {"anyOf": [{"type": "string"}, {"type": "integer"}]}
    details = validate_resource([], schema)
    assert details.how.startswith("It can be any of these errors [")
    assert "'string'" in details.how
    assert "'integer'" in details.how


def test_accepts_compiled_validator():
    validator = compile_schema(AB_SCHEMA)
    assert validate_resource({"a": "x", "b": "y"}, validator) is None
    assert validate_resource({}, validator) is not None


def test_array_index_in_where():
    schema = {"type": "array", "items": {"type": "integer"}}
    details = validate_resource([1, "two"], schema, "response/body")
    assert details.where == "response/body/1"


def test_invalid_schema_raises_configuration_error():
    with pytest.raises(ConfigurationError, match="Invalid schema"):
        compile_schema({"type": "not-a-type"})


def test_where_escapes_pointer_tokens():
    schema = {
        "type": "object",
        "properties": {"a/b": {"type": "string"}, "c~d": {"type": "string"}},
    }
    assert validate_resource({"a/b": 1}, schema).where == "/a~1b"
    assert validate_resource({"c~d": 1}, schema).where == "/c~0d"
