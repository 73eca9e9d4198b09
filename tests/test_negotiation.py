"""Tests for content negotiation."""

import pytest

from exchange_io import InputError
from exchange_io.negotiation import ACCEPT_MESSAGE, negotiate, parse_accept


def test_json_accept():
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    assert negotiate(headers) == ["application/json"]


def test_header_names_are_case_insensitive():
    headers = {"content-type": "application/json; charset=utf-8", "ACCEPT": "*/*"}
    assert negotiate(headers) == ["*/*"]


def test_quality_values_are_dropped():
    assert parse_accept("text/html;q=0.9, application/json;q=0.8") == [
        "text/html",
        "application/json",
    ]


def test_intersection_keeps_client_order():
    headers = {"Content-Type": "application/json", "Accept": "*/*, application/json;q=0.5, *"}
    assert negotiate(headers) == ["*/*", "application/json", "*"]


def test_empty_accept_enumerates_declared_types():
    with pytest.raises(InputError) as info:
        negotiate({"Content-Type": "application/json", "Accept": ""})

    assert str(info.value) == ACCEPT_MESSAGE + '[""]'
    assert info.value.status == 400


def test_missing_accept_counts_as_empty():
    with pytest.raises(InputError, match=r'\[""\]$'):
        negotiate({"Content-Type": "application/json"})


def test_unsupported_accept_lists_types():
    with pytest.raises(InputError) as info:
        negotiate({"Content-Type": "application/json", "Accept": "text/html, text/plain"})
    assert str(info.value).endswith('["text/html","text/plain"]')


def test_extra_content_types():
    headers = {"Content-Type": "application/json", "Accept": "text/html"}
    assert negotiate(headers, ["application/json"]) == ["application/json"]


@pytest.mark.parametrize(
    "headers",
    [None, {}, {"Accept": "application/json"}, {"Content-Type": "text/plain"}],
)
def test_rejects_non_json_body(headers):
    with pytest.raises(InputError, match="Please use application-json as Content-Type header"):
        negotiate(headers)
