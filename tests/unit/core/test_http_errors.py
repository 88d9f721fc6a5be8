# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from notional.core.errors import HttpError, NotionalError, UnknownColumnError, ValidationError
from notional.core._error_codes import ALL_HTTP_SUBCODES, HTTP_401, HTTP_429, HTTP_500, _http_subcode
from tests.unit.test_helpers import KEYS, TestableTransport


# --- Transport error mapping ---


def test_non_json_error_uses_generic_message():
    transport = TestableTransport([(500, {}, "Internal Server Error")])
    with pytest.raises(HttpError) as ei:
        transport._load_user_content()
    err = ei.value
    assert err.status_code == 500
    assert err.subcode == HTTP_500
    assert err.is_transient is False
    assert err.source == "server"
    assert err.details["path"] == "loadUserContent"
    assert err.details["body_excerpt"] == "Internal Server Error"
    assert "loadUserContent" in err.message


def test_json_error_message_is_surfaced():
    body = {"errorId": "e1", "name": "UnauthorizedError", "message": "Token was invalid or expired."}
    transport = TestableTransport([(401, {}, body)])
    with pytest.raises(HttpError) as ei:
        transport._query_collection(KEYS)
    assert ei.value.subcode == HTTP_401
    assert ei.value.message == "Token was invalid or expired."


def test_rate_limit_is_transient_with_retry_after():
    transport = TestableTransport([(429, {"Retry-After": "7"}, {"name": "RateLimitedError"})])
    with pytest.raises(HttpError) as ei:
        transport._submit_transaction([])
    err = ei.value
    assert err.subcode == HTTP_429
    assert err.is_transient is True
    assert err.details["retry_after"] == 7
    assert err.message == "RateLimitedError"


def test_body_excerpt_is_truncated():
    transport = TestableTransport([(400, {}, "x" * 2000)])
    with pytest.raises(HttpError) as ei:
        transport._load_page_chunk("abc")
    assert len(ei.value.details["body_excerpt"]) == 500


def test_empty_success_body_returns_empty_dict():
    transport = TestableTransport([(200, {}, "")])
    assert transport._submit_transaction([]) == {}


# --- Error model ---


def test_http_subcodes_cover_known_statuses():
    for status in (400, 401, 403, 404, 409, 429, 500, 502, 503, 504):
        assert _http_subcode(status) in ALL_HTTP_SUBCODES


def test_error_to_dict_is_serializable():
    err = ValidationError("bad input", subcode="validation_rows_not_list", details={"got": "str"})
    data = err.to_dict()
    assert data["code"] == "validation_error"
    assert data["subcode"] == "validation_rows_not_list"
    assert data["source"] == "client"
    assert data["details"] == {"got": "str"}
    assert data["timestamp"].endswith("Z")


def test_unknown_column_error_names_the_column():
    err = UnknownColumnError("Colour")
    assert isinstance(err, NotionalError)
    assert err.column == "Colour"
    assert err.details["column"] == "Colour"
    assert "Colour" in str(err)
