"""Shared test fixtures."""

import pytest

from exchange_io import IO, Exchange, Pipeline, Request, Response, error_middleware

JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


@pytest.fixture
def req_body_schema():
    return {
        "type": "object",
        "properties": {
            "firstProperty": {"type": "string"},
            "objectProperty": {
                "type": "object",
                "properties": {"nestedProperty": {"type": "string"}},
                "required": ["nestedProperty"],
            },
        },
        "required": ["firstProperty", "objectProperty"],
    }


@pytest.fixture
def req_query_schema():
    return {
        "type": "object",
        "properties": {"queryProperty": {"type": "string"}},
        "required": ["queryProperty"],
    }


@pytest.fixture
def res_body_schema():
    return {
        "type": "object",
        "properties": {"firstProperty": {"type": "string"}},
        "required": ["firstProperty"],
    }


@pytest.fixture
def io(req_body_schema, res_body_schema):
    return IO(req_body_schema=req_body_schema, res_body_schema=res_body_schema)


@pytest.fixture
def exchange():
    return Exchange(request=Request(headers=dict(JSON_HEADERS)), response=Response())


@pytest.fixture
def recorder():
    """A ``call_next`` that records every call."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, err=None):
            self.calls.append(err)

        @property
        def error(self):
            return self.calls[-1] if self.calls else None

    return Recorder()


@pytest.fixture
def pipeline():
    return Pipeline()


@pytest.fixture
def terminal():
    return error_middleware(show_trace=False)
