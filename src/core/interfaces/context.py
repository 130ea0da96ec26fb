"""Contrato del contexto de ejecución.

Por qué Protocol:
- El ejecutor solo necesita un correlation id; cualquier objeto del servicio
  llamante que exponga `get_correlation_id()` sirve, sin herencia.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ExecutionContext(Protocol):
    """Capacidad por llamada que el ejecutor toma prestada."""

    def get_correlation_id(self) -> str:
        """Devuelve el identificador que viaja en `X-Correlation-ID`."""

        ...
