"""Errores del cliente de servicios.

- `APICallError`: fallo de construcción, transporte, HTTP o decodificación.
  Lleva la URL, y opcionalmente status y cuerpo (campos independientes).
- `ShapeMismatchError`: HTTP fue bien y el JSON se decodificó, pero no tenía
  la forma (objeto / lista de objetos) que la operación esperaba.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Etapa de la llamada en la que se produjo el fallo."""

    BUILD = "build"
    TRANSPORT = "transport"
    HTTP = "http"
    DECODE = "decode"


class ServiceClientError(Exception):
    """Base de todos los errores que expone el cliente."""


class APICallError(ServiceClientError):
    def __init__(
        self,
        url: str,
        status_code: int | None,
        body: str | None,
        cause: BaseException,
        *,
        kind: ErrorKind,
        body_read_error: BaseException | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        self.cause = cause
        self.kind = kind
        self.body_read_error = body_read_error
        super().__init__(self._format())

    def _format(self) -> str:
        details = []
        if self.status_code is not None:
            details.append(f"status={self.status_code}")
        if self.body:
            details.append(f"body={self.body[:200]!r}")
        details.append(f"cause={self.cause}")
        return f"API call to {self.url} failed ({self.kind.value}): " + ", ".join(details)


class ShapeMismatchError(ServiceClientError):
    def __init__(self, url: str, expected: str, actual: str) -> None:
        self.url = url
        self.expected = expected
        self.actual = actual
        super().__init__(f"Could not parse JSON from {url}: expected {expected}, got {actual}")
