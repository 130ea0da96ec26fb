"""Factorías de httpx.

Por qué un builder:
- Centraliza timeouts/redirecciones para que todos los ejecutores se comporten igual.
- El cliente es compartido y de larga vida; el ejecutor lo recibe inyectado,
  nunca lo crea como singleton de proceso.
"""

from __future__ import annotations

import httpx

from core.config import ClientSettings


# Cabeceras que fija el ejecutor en cada llamada; no se aceptan como defaults.
RESERVED_HEADERS = frozenset({"authorization", "x-client", "x-correlation-id", "content-type"})


def _client_kwargs(settings: ClientSettings, extra_headers: dict[str, str] | None) -> dict:
    headers = dict(extra_headers or {})
    reserved = sorted(name for name in headers if name.lower() in RESERVED_HEADERS)
    if reserved:
        raise ValueError(f"extra_headers cannot override per-call headers: {', '.join(reserved)}")
    return {
        "timeout": httpx.Timeout(settings.http_timeout_seconds),
        "follow_redirects": settings.follow_redirects,
        "headers": headers,
    }


def build_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono (thread-safe) con los defaults del proyecto."""

    settings = settings or ClientSettings()
    return httpx.Client(**_client_kwargs(settings, extra_headers))


def build_async_client(
    settings: ClientSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los defaults del proyecto."""

    settings = settings or ClientSettings()
    return httpx.AsyncClient(**_client_kwargs(settings, extra_headers))
