"""Modelos del dominio (Pydantic v2).

Nota:
- Estos modelos describen *qué* acompaña a una llamada, no *cómo* se envía.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

CORRELATION_HEADER = "X-Correlation-ID"

Payload = Mapping[str, Any]


class CorrelationContext(BaseModel):
    """Contexto de ejecución mínimo: solo aporta el correlation id.

    Implementa `core.interfaces.context.ExecutionContext`. Los servicios que
    ya tengan su propio contexto pueden pasarlo directamente si expone
    `get_correlation_id()`.
    """

    model_config = ConfigDict(frozen=True)

    correlation_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        min_length=1,
        description="Identificador para correlacionar logs entre servicios.",
    )

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "CorrelationContext":
        """Reutiliza el `X-Correlation-ID` entrante si existe; si no, genera uno."""

        for key, value in headers.items():
            if key.lower() == CORRELATION_HEADER.lower() and value.strip():
                return cls(correlation_id=value.strip())
        return cls()

    def get_correlation_id(self) -> str:
        return self.correlation_id
