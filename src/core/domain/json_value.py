"""Valor JSON como unión etiquetada.

El decodificador produce estructuras Python sin tipo estático (dict/list/escalares);
aquí se envuelven en `JsonObject | JsonArray | JsonScalar` para que cada operación
compruebe la forma con `match` en lugar de confiar en tipado dinámico implícito.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class JsonObject:
    fields: dict[str, Any]

    kind = "object"


@dataclass(frozen=True)
class JsonArray:
    items: list[Any]

    kind = "array"

    def __iter__(self) -> Iterator[JsonValue]:
        for item in self.items:
            yield to_json_value(item)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class JsonScalar:
    """null, bool, número o string."""

    value: str | int | float | bool | None

    kind = "scalar"


JsonValue = Union[JsonObject, JsonArray, JsonScalar]


def to_json_value(raw: Any) -> JsonValue:
    """Envuelve el resultado de `json.loads` en la variante correspondiente."""

    if isinstance(raw, dict):
        return JsonObject(raw)
    if isinstance(raw, list):
        return JsonArray(raw)
    if raw is None or isinstance(raw, (str, int, float, bool)):
        return JsonScalar(raw)
    raise TypeError(f"Not a JSON value: {type(raw).__name__}")
