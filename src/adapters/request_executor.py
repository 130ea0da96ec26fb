"""Ejecutor de llamadas REST/JSON entre servicios (httpx).

Flujo de cada llamada:
  URL (base + path) -> request con método/cuerpo/cabeceras -> transporte ->
  clasificación del status -> decodificación -> resultado o `APICallError`.

El ejecutor no guarda estado por llamada; el único objeto compartido es el
cliente httpx inyectado, que soporta uso concurrente. Un único intento por
llamada: sin reintentos ni backoff.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx

from adapters.http_client import build_async_client, build_client
from core.config import ClientSettings
from core.domain.errors import APICallError, ErrorKind
from core.domain.json_value import JsonValue
from core.domain.models import CORRELATION_HEADER, Payload
from core.interfaces.context import ExecutionContext
from core.services.request_pipeline import (
    GENERIC,
    PreparedCall,
    ResponseHandler,
    build_url,
    decode_failure,
    expect_object,
    expect_object_list,
    handler_for,
    http_failure,
    is_success_status,
    prepare_call,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Errores de lectura del stream de respuesta.
_READ_ERRORS = (httpx.HTTPError, httpx.StreamError)


class _BaseExecutor:
    """Configuración estática común a ambos ejecutores."""

    def __init__(
        self,
        app_name: str,
        base_url: str,
        client: Any,
        *,
        capture_body_read_errors: bool = False,
    ) -> None:
        self._app_name = app_name
        self._base_url = base_url
        self._client = client
        self._capture_body_read_errors = capture_body_read_errors

    @property
    def app_name(self) -> str:
        return self._app_name

    @property
    def base_url(self) -> str:
        return self._base_url

    def _prepare(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str,
        payload: Payload | None,
    ) -> PreparedCall:
        return prepare_call(
            app_name=self._app_name,
            base_url=self._base_url,
            context=context,
            path=path,
            method=method,
            raw_token=raw_token,
            payload=payload,
        )

    def _build_request(self, call: PreparedCall, timeout: float | None) -> httpx.Request:
        try:
            request = self._client.build_request(
                call.method,
                call.url,
                content=call.content,
                headers=call.headers,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            logger.warning("Unable to create HTTP request for %s %s: %s", call.method, call.url, exc)
            raise APICallError(call.url, None, None, exc, kind=ErrorKind.BUILD) from exc

        logger.debug(
            "%s %s (correlation_id=%s)",
            call.method,
            call.url,
            call.headers[CORRELATION_HEADER],
        )
        return request

    @staticmethod
    def _transport_failure(call: PreparedCall, exc: httpx.RequestError) -> APICallError:
        logger.warning("Unable to invoke API %s %s: %s", call.method, call.url, exc)
        return APICallError(call.url, None, None, exc, kind=ErrorKind.TRANSPORT)

    def _http_failure(
        self,
        call: PreparedCall,
        status_code: int,
        body: str,
        read_error: BaseException | None,
    ) -> APICallError:
        return http_failure(
            call.url,
            status_code,
            body,
            read_error=read_error,
            capture_read_error=self._capture_body_read_errors,
        )


class RequestExecutor(_BaseExecutor):
    """Cliente síncrono: cada llamada bloquea el hilo hasta terminar."""

    def __init__(
        self,
        app_name: str,
        base_url: str,
        client: httpx.Client,
        *,
        capture_body_read_errors: bool = False,
    ) -> None:
        super().__init__(
            app_name,
            base_url,
            client,
            capture_body_read_errors=capture_body_read_errors,
        )

    def _call(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str,
        payload: Payload | None,
        handler: ResponseHandler[T],
        timeout: float | None,
    ) -> T | None:
        call = self._prepare(context, path, method, raw_token, payload)
        request = self._build_request(call, timeout)

        try:
            response = self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise self._transport_failure(call, exc) from exc

        try:
            if not is_success_status(response.status_code):
                body = ""
                read_error: BaseException | None = None
                try:
                    response.read()
                    body = response.text
                except _READ_ERRORS as exc:
                    read_error = exc
                raise self._http_failure(call, response.status_code, body, read_error)

            if handler.decoder is None:
                return None
            try:
                return handler.decoder(response.read())
            except (*_READ_ERRORS, ValueError, RecursionError) as exc:
                raise decode_failure(call.url, response.status_code, exc) from exc
        finally:
            response.close()

    def execute(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> JsonValue:
        """Ejecuta la llamada y devuelve el cuerpo como `JsonValue` genérico."""

        return self._call(context, path, method, raw_token, payload, GENERIC, timeout)

    def execute_typed(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str = "",
        payload: Payload | None = None,
        destination: Any | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        """Ejecuta la llamada y valida el cuerpo contra `destination`.

        Sin `destination` el cuerpo no se lee y se devuelve `None`.
        """

        handler = handler_for(destination)
        return self._call(context, path, method, raw_token, payload, handler, timeout)

    def get_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        value = self.execute(context, path, "GET", raw_token, timeout=timeout)
        return expect_object(build_url(self._base_url, path), value)

    def get_list(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        *,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]:
        value = self.execute(context, path, "GET", raw_token, timeout=timeout)
        return expect_object_list(build_url(self._base_url, path), value)

    def post_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        value = self.execute(context, path, "POST", raw_token, payload, timeout=timeout)
        return expect_object(build_url(self._base_url, path), value)

    def delete_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        self.execute_typed(context, path, "DELETE", raw_token, payload, None, timeout=timeout)


class AsyncRequestExecutor(_BaseExecutor):
    """Variante `async` con el mismo contrato sobre `httpx.AsyncClient`."""

    def __init__(
        self,
        app_name: str,
        base_url: str,
        client: httpx.AsyncClient,
        *,
        capture_body_read_errors: bool = False,
    ) -> None:
        super().__init__(
            app_name,
            base_url,
            client,
            capture_body_read_errors=capture_body_read_errors,
        )

    async def _call(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str,
        payload: Payload | None,
        handler: ResponseHandler[T],
        timeout: float | None,
    ) -> T | None:
        call = self._prepare(context, path, method, raw_token, payload)
        request = self._build_request(call, timeout)

        try:
            response = await self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise self._transport_failure(call, exc) from exc

        try:
            if not is_success_status(response.status_code):
                body = ""
                read_error: BaseException | None = None
                try:
                    await response.aread()
                    body = response.text
                except _READ_ERRORS as exc:
                    read_error = exc
                raise self._http_failure(call, response.status_code, body, read_error)

            if handler.decoder is None:
                return None
            try:
                return handler.decoder(await response.aread())
            except (*_READ_ERRORS, ValueError, RecursionError) as exc:
                raise decode_failure(call.url, response.status_code, exc) from exc
        finally:
            await response.aclose()

    async def execute(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> JsonValue:
        return await self._call(context, path, method, raw_token, payload, GENERIC, timeout)

    async def execute_typed(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str = "",
        payload: Payload | None = None,
        destination: Any | None = None,
        *,
        timeout: float | None = None,
    ) -> Any:
        handler = handler_for(destination)
        return await self._call(context, path, method, raw_token, payload, handler, timeout)

    async def get_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        value = await self.execute(context, path, "GET", raw_token, timeout=timeout)
        return expect_object(build_url(self._base_url, path), value)

    async def get_list(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        *,
        timeout: float | None = None,
    ) -> list[dict[str, Any]]:
        value = await self.execute(context, path, "GET", raw_token, timeout=timeout)
        return expect_object_list(build_url(self._base_url, path), value)

    async def post_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> dict[str, Any]:
        value = await self.execute(context, path, "POST", raw_token, payload, timeout=timeout)
        return expect_object(build_url(self._base_url, path), value)

    async def delete_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        await self.execute_typed(context, path, "DELETE", raw_token, payload, None, timeout=timeout)


def build_request_executor(
    settings: ClientSettings | None = None,
    *,
    client: httpx.Client | None = None,
) -> RequestExecutor:
    """Conecta settings + transporte. Sin `client` se crea uno con `build_client`."""

    settings = settings or ClientSettings()
    return RequestExecutor(
        settings.app_name,
        settings.base_url,
        client if client is not None else build_client(settings),
        capture_body_read_errors=settings.capture_body_read_errors,
    )


def build_async_request_executor(
    settings: ClientSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> AsyncRequestExecutor:
    settings = settings or ClientSettings()
    return AsyncRequestExecutor(
        settings.app_name,
        settings.base_url,
        client if client is not None else build_async_client(settings),
        capture_body_read_errors=settings.capture_body_read_errors,
    )
