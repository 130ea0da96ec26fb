"""Unit tests for the transport-agnostic request rules."""

from __future__ import annotations

import json
import logging

import pytest

from core.domain.errors import APICallError, ErrorKind, ShapeMismatchError
from core.domain.json_value import JsonArray, JsonObject, JsonScalar, to_json_value
from core.domain.models import CorrelationContext
from core.services.request_pipeline import (
    authorization_value,
    build_headers,
    build_url,
    encode_payload,
    expect_object,
    expect_object_list,
    handler_for,
    http_failure,
    is_success_status,
    prepare_call,
)

URL = "http://widgets.test/widgets"


# ====================
# URL / headers
# ====================


def test_build_url_is_plain_concatenation():
    assert build_url("http://svc:8080/api", "/widgets") == "http://svc:8080/api/widgets"
    assert build_url("http://svc:8080/api/", "/widgets") == "http://svc:8080/api//widgets"
    assert build_url("http://svc:8080", "widgets") == "http://svc:8080widgets"


@pytest.mark.parametrize(
    ("raw_token", "expected"),
    [
        ("abc123", "Bearer abc123"),
        ("bearer abc", "Bearer bearer abc"),
        ("Bearer abc123", "Bearer abc123"),
        ("Bearerabc123", "Bearerabc123"),
        ("", None),
    ],
)
def test_authorization_value(raw_token, expected):
    assert authorization_value(raw_token) == expected


def test_build_headers_with_token():
    headers = build_headers(
        app_name="orders-service",
        context=CorrelationContext(correlation_id="c-1"),
        raw_token="tok",
    )

    assert headers == {
        "Authorization": "Bearer tok",
        "X-Client": "orders-service",
        "X-Correlation-ID": "c-1",
        "Content-Type": "application/json",
    }


def test_build_headers_without_token_omits_authorization():
    headers = build_headers(
        app_name="orders-service",
        context=CorrelationContext(correlation_id="c-1"),
        raw_token="",
    )

    assert "Authorization" not in headers
    assert headers["Content-Type"] == "application/json"


# ====================
# Payload encoding
# ====================


def test_encode_payload_is_canonical_json():
    payload = {"name": "y", "a": 1, "nested": {"z": [1, None, True], "b": "x"}}

    assert encode_payload(payload) == b'{"a":1,"name":"y","nested":{"b":"x","z":[1,null,true]}}'


def test_encode_payload_keeps_utf8():
    assert encode_payload({"name": "ñandú"}) == '{"name":"ñandú"}'.encode("utf-8")


def test_prepare_call_without_payload_has_no_body():
    call = prepare_call(
        app_name="a",
        base_url="http://svc",
        context=CorrelationContext(correlation_id="c"),
        path="/w",
        method="get",
        raw_token="",
        payload=None,
    )

    assert call.method == "GET"
    assert call.url == "http://svc/w"
    assert call.content is None


def test_prepare_call_with_empty_payload_sends_empty_object():
    call = prepare_call(
        app_name="a",
        base_url="http://svc",
        context=CorrelationContext(correlation_id="c"),
        path="/w/1",
        method="DELETE",
        raw_token="",
        payload={},
    )

    assert call.content == b"{}"


@pytest.mark.parametrize("bad_value", [float("nan"), float("inf"), object(), {1, 2}])
def test_prepare_call_serialization_failure_is_build_error(bad_value):
    with pytest.raises(APICallError) as exc_info:
        prepare_call(
            app_name="a",
            base_url="http://svc",
            context=CorrelationContext(correlation_id="c"),
            path="/w",
            method="POST",
            raw_token="",
            payload={"value": bad_value},
        )

    err = exc_info.value
    assert err.kind is ErrorKind.BUILD
    assert err.url == "http://svc/w"
    assert err.status_code is None
    assert err.body is None
    assert err.cause is err.__cause__


# ====================
# Status classification
# ====================


@pytest.mark.parametrize("status", [100, 200, 201, 204, 299, 300])
def test_success_statuses(status):
    assert is_success_status(status)


@pytest.mark.parametrize("status", [301, 302, 304, 400, 404, 409, 500, 503, 599])
def test_failure_statuses(status):
    assert not is_success_status(status)


def test_http_failure_drops_read_error_by_default(caplog):
    read_error = RuntimeError("reset")

    with caplog.at_level(logging.WARNING, logger="core.services.request_pipeline"):
        err = http_failure(URL, 502, "", read_error=read_error)

    assert err.kind is ErrorKind.HTTP
    assert err.status_code == 502
    assert err.body == ""
    assert err.body_read_error is None
    assert "Received non-success code: 502" in str(err.cause)
    assert "HTTP 502" in caplog.text


def test_http_failure_can_capture_read_error():
    read_error = RuntimeError("reset")

    err = http_failure(URL, 502, "", read_error=read_error, capture_read_error=True)

    assert err.body == ""
    assert err.body_read_error is read_error


# ====================
# Decoding and shapes
# ====================


def test_to_json_value_variants():
    assert to_json_value({"a": 1}) == JsonObject({"a": 1})
    assert to_json_value([1, 2]) == JsonArray([1, 2])
    assert to_json_value("x") == JsonScalar("x")
    assert to_json_value(None) == JsonScalar(None)
    with pytest.raises(TypeError):
        to_json_value(object())


def test_typed_handler_validates_bytes():
    handler = handler_for(dict[str, int])

    assert handler.reads_body
    assert handler.decoder(b'{"a": 1}') == {"a": 1}


def test_handler_without_destination_skips_body():
    handler = handler_for(None)

    assert not handler.reads_body
    assert handler.decoder is None


def test_expect_object_returns_mapping():
    assert expect_object(URL, JsonObject({"id": 1})) == {"id": 1}


@pytest.mark.parametrize("value", [JsonArray([{"id": 1}]), JsonScalar(3), JsonScalar(None)])
def test_expect_object_rejects_other_shapes(value):
    with pytest.raises(ShapeMismatchError) as exc_info:
        expect_object(URL, value)

    assert exc_info.value.expected == "object"
    assert exc_info.value.actual == value.kind


def test_expect_object_list_returns_objects():
    raw = json.loads('[{"a": 1}, {"b": 2}]')

    assert expect_object_list(URL, to_json_value(raw)) == [{"a": 1}, {"b": 2}]
    assert expect_object_list(URL, JsonArray([])) == []


def test_expect_object_list_stops_at_first_non_object():
    with pytest.raises(ShapeMismatchError) as exc_info:
        expect_object_list(URL, JsonArray([{"a": 1}, 2, "x"]))

    assert exc_info.value.actual == "scalar at index 1"


def test_expect_object_list_rejects_object():
    with pytest.raises(ShapeMismatchError):
        expect_object_list(URL, JsonObject({"a": 1}))
