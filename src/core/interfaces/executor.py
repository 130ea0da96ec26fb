"""Contrato público del cliente de servicios.

Los servicios consumidores dependen de este Protocol y no de httpx; en tests
se puede sustituir por cualquier objeto con la misma forma.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import Payload
from core.interfaces.context import ExecutionContext


@runtime_checkable
class ServiceClient(Protocol):
    """Superficie síncrona: GET uno/lista, POST, DELETE y llamada tipada."""

    def get_one(self, context: ExecutionContext, path: str, raw_token: str = "") -> dict[str, Any]:
        ...

    def get_list(self, context: ExecutionContext, path: str, raw_token: str = "") -> list[dict[str, Any]]:
        ...

    def post_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
    ) -> dict[str, Any]:
        ...

    def delete_one(
        self,
        context: ExecutionContext,
        path: str,
        raw_token: str = "",
        payload: Payload | None = None,
    ) -> None:
        ...

    def execute_typed(
        self,
        context: ExecutionContext,
        path: str,
        method: str,
        raw_token: str = "",
        payload: Payload | None = None,
        destination: Any | None = None,
    ) -> Any:
        ...
