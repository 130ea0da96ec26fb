"""Request/response rules shared by the sync and async executors.

Everything here is transport-agnostic: URL joining, header rules, payload
encoding, status classification, body decoding and the shape checks used
by the public wrappers. The executors in ``adapters.request_executor`` only
add the actual I/O around these helpers, so both flavours produce identical
headers and identical errors.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from pydantic import TypeAdapter

from core.domain.errors import APICallError, ErrorKind, ShapeMismatchError
from core.domain.json_value import JsonArray, JsonObject, JsonValue, to_json_value
from core.domain.models import CORRELATION_HEADER, Payload
from core.interfaces.context import ExecutionContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

BEARER_PREFIX = "Bearer"
JSON_CONTENT_TYPE = "application/json"

# Decodes the raw body of a successful response. `None` means "do not read
# or decode the body at all".
BodyDecoder = Callable[[bytes], T]


@dataclass(frozen=True)
class PreparedCall:
    """Everything needed to put one request on the wire."""

    method: str
    url: str
    headers: dict[str, str]
    content: bytes | None = None


@dataclass(frozen=True)
class ResponseHandler(Generic[T]):
    """How to finish a successful response.

    ``decoder`` is ``None`` for typed-void calls, in which case the body is
    never read.
    """

    decoder: BodyDecoder[T] | None

    @property
    def reads_body(self) -> bool:
        return self.decoder is not None


def build_url(base_url: str, path: str) -> str:
    """Plain concatenation; the caller owns slash conventions."""

    return base_url + path


def authorization_value(raw_token: str) -> str | None:
    if not raw_token:
        return None
    if raw_token.startswith(BEARER_PREFIX):
        return raw_token
    return f"{BEARER_PREFIX} {raw_token}"


def build_headers(*, app_name: str, context: ExecutionContext, raw_token: str) -> dict[str, str]:
    headers: dict[str, str] = {}
    authorization = authorization_value(raw_token)
    if authorization is not None:
        headers["Authorization"] = authorization
    headers["X-Client"] = app_name
    headers[CORRELATION_HEADER] = context.get_correlation_id()
    headers["Content-Type"] = JSON_CONTENT_TYPE
    return headers


def encode_payload(payload: Payload) -> bytes:
    """Canonical JSON: compact separators, sorted keys, no NaN/Infinity."""

    return json.dumps(
        payload,
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def prepare_call(
    *,
    app_name: str,
    base_url: str,
    context: ExecutionContext,
    path: str,
    method: str,
    raw_token: str,
    payload: Payload | None,
) -> PreparedCall:
    """Build URL, body and headers; raises a BUILD error before any I/O."""

    url = build_url(base_url, path)
    content: bytes | None = None
    if payload is not None:
        try:
            content = encode_payload(payload)
        except (TypeError, ValueError, RecursionError) as exc:
            logger.warning("Unable to marshal payload for %s %s: %s", method, url, exc)
            raise APICallError(url, None, None, exc, kind=ErrorKind.BUILD) from exc

    headers = build_headers(app_name=app_name, context=context, raw_token=raw_token)
    return PreparedCall(method=method.upper(), url=url, headers=headers, content=content)


def is_success_status(status_code: int) -> bool:
    """Anything above 300 is a failure; 300 itself still counts as success."""

    return status_code <= 300


def http_failure(
    url: str,
    status_code: int,
    body: str,
    *,
    read_error: BaseException | None = None,
    capture_read_error: bool = False,
) -> APICallError:
    cause = RuntimeError(f"Received non-success code: {status_code}")
    if read_error is not None:
        logger.debug("Ignoring error body read failure for %s: %s", url, read_error)
    logger.warning("Non-success response from %s: HTTP %s", url, status_code)
    return APICallError(
        url,
        status_code,
        body,
        cause,
        kind=ErrorKind.HTTP,
        body_read_error=read_error if capture_read_error else None,
    )


def decode_failure(url: str, status_code: int, exc: BaseException) -> APICallError:
    logger.warning("Unable to parse response payload from %s (HTTP %s): %s", url, status_code, exc)
    return APICallError(url, status_code, None, exc, kind=ErrorKind.DECODE)


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Invalid JSON token: {token}")


def decode_generic(content: bytes) -> JsonValue:
    """Strict JSON: `NaN`, `Infinity` and `-Infinity` are rejected."""

    return to_json_value(json.loads(content, parse_constant=_reject_constant))


def typed_decoder(destination: Any) -> BodyDecoder[Any]:
    """Decoder that validates the body into ``destination``.

    ``destination`` is anything ``pydantic.TypeAdapter`` accepts: a model
    class, ``list[Model]``, ``dict[str, int]``...
    """

    adapter = TypeAdapter(destination)
    return adapter.validate_json


GENERIC = ResponseHandler(decode_generic)
NO_DECODE: ResponseHandler[None] = ResponseHandler(None)


def handler_for(destination: Any | None) -> ResponseHandler[Any]:
    if destination is None:
        return NO_DECODE
    return ResponseHandler(typed_decoder(destination))


def expect_object(url: str, value: JsonValue) -> dict[str, Any]:
    match value:
        case JsonObject(fields=fields):
            return fields
        case _:
            raise ShapeMismatchError(url, expected="object", actual=value.kind)


def expect_object_list(url: str, value: JsonValue) -> list[dict[str, Any]]:
    match value:
        case JsonArray() as array:
            objects: list[dict[str, Any]] = []
            for index, item in enumerate(array):
                match item:
                    case JsonObject(fields=fields):
                        objects.append(fields)
                    case _:
                        raise ShapeMismatchError(
                            url,
                            expected="array of objects",
                            actual=f"{item.kind} at index {index}",
                        )
            return objects
        case _:
            raise ShapeMismatchError(url, expected="array of objects", actual=value.kind)
