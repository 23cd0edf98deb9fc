"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Nos da validación estricta y documentación autocontenida (Field) sin acoplar
  el Core a librerías de I/O.

Nota:
- Estos modelos describen *qué* es un parámetro de webhook, no *cómo* se lee
  (CLI/stdin) ni *cómo* se envía (HTTP).
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Mapping, Union

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.errors import ParseError

REDACTED = "[REDACTED]"


class ValueShape(str, Enum):
    """Forma declarada de un valor de parámetro."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    MOMENT = "moment"

    def label(self) -> str:
        """Human readable label for error messages."""

        if self is ValueShape.MOMENT:
            return "Moment.from({ session_id, input_hash, vtime })"
        return self.value


class Credentials(BaseModel):
    """Credenciales de la API; inmutables una vez cargadas."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1, description="Usuario Basic Auth.")
    password: str = Field(..., min_length=1, repr=False, description="Password Basic Auth.")
    tenant: str = Field(..., min_length=1, description="Tenant que acota las URLs.")


class NumberLiteral(str):
    """Texto fuente de un número leído de stdin (JSON5).

    Por qué un `str`:
    - `input_hash` y demás claves String deben conservar el literal exacto
      (`1e5` no puede volverse `1E+5` ni `100000.0`).
    - Las claves numéricas lo convierten recién cuando conocen su forma.
    """

    @property
    def is_integral(self) -> bool:
        text = self.strip().lstrip("+-").lower()
        if text.startswith("0x"):
            return True
        return text.isdigit()


MOMENT_FIELDS = ("session_id", "input_hash", "vtime")


class Moment(BaseModel):
    """Un punto grabado de una ejecución, desde el que se reanuda el debugging.

    `input_hash` es un identificador opaco con aspecto numérico: se guarda como
    el literal exacto recibido para no perder precisión.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(..., min_length=1, description="Sesión de la ejecución.")
    input_hash: str = Field(..., min_length=1, description="Hash de entrada (literal exacto).")
    vtime: float = Field(..., description="Tiempo virtual dentro de la sesión.")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Moment":
        """Aplica el contrato de campos del Moment a un objeto ya estructurado (JSON).

        Los campos desconocidos se ignoran; faltantes o mal formados -> `ParseError`.
        """

        missing = [name for name in MOMENT_FIELDS if name not in data]
        if missing:
            raise ParseError(
                f"invalid Moment: missing field(s) {', '.join(missing)}",
                token=str(dict(data)),
                expected=ValueShape.MOMENT.label(),
            )

        session_id = data["session_id"]
        if not isinstance(session_id, str) or isinstance(session_id, NumberLiteral) or not session_id:
            raise ParseError(
                f"invalid Moment: field session_id must be a non-empty string, got {session_id!r}",
                token=repr(session_id),
                expected="string",
            )

        input_hash = data["input_hash"]
        if isinstance(input_hash, bool) or not isinstance(input_hash, (str, int, Decimal)):
            raise ParseError(
                f"invalid Moment: field input_hash must be a string, got {input_hash!r}",
                token=repr(input_hash),
                expected="string",
            )
        input_hash = str(input_hash)
        if not input_hash:
            raise ParseError("invalid Moment: field input_hash is empty", token="", expected="string")

        vtime = coerce_float(data["vtime"], field="vtime")
        return cls(session_id=session_id, input_hash=input_hash, vtime=vtime)

    def to_json(self) -> dict[str, Any]:
        return {"session_id": self.session_id, "input_hash": self.input_hash, "vtime": self.vtime}


def coerce_float(value: Any, *, field: str) -> float:
    """Convierte un valor JSON (número o texto numérico) a float finito."""

    if isinstance(value, bool):
        raise ParseError(f"invalid value for {field}: expected float, got {value!r}", token=repr(value), expected="float")
    if isinstance(value, (int, float, Decimal)):
        result = float(value)
    elif isinstance(value, str):
        try:
            result = float(value.strip())
        except ValueError:
            raise ParseError(
                f"invalid value for {field}: expected float, got {value!r}",
                token=value,
                expected="float",
            ) from None
    else:
        raise ParseError(f"invalid value for {field}: expected float, got {value!r}", token=repr(value), expected="float")
    if not math.isfinite(result):
        raise ParseError(f"invalid value for {field}: {value!r} is not a finite number", token=str(value), expected="float")
    return result


ParameterValue = Union[str, int, float, Moment]


def shape_of(value: ParameterValue) -> ValueShape:
    if isinstance(value, Moment):
        return ValueShape.MOMENT
    if isinstance(value, bool):
        raise TypeError("booleans are not parameter values")
    if isinstance(value, int):
        return ValueShape.INTEGER
    if isinstance(value, float):
        return ValueShape.FLOAT
    if isinstance(value, str):
        return ValueShape.STRING
    raise TypeError(f"unsupported parameter value: {value!r}")


def is_sensitive_key(key: str) -> bool:
    return key.endswith(".token") or key == "antithesis.report.recipients"


class ParameterSet:
    """Mapa ordenado clave -> valor tipado.

    Reglas:
    - claves únicas, la última escritura gana;
    - una clave nunca cambia de forma (String -> Float, etc.) una vez fijada.
    """

    def __init__(self, items: Mapping[str, ParameterValue] | None = None) -> None:
        self._items: dict[str, ParameterValue] = {}
        for key, value in (items or {}).items():
            self.set(key, value)

    def set(self, key: str, value: ParameterValue) -> None:
        if not key:
            raise ParseError("parameter key must not be empty", token=key)
        shape = shape_of(value)
        current = self._items.get(key)
        if current is not None and shape_of(current) is not shape:
            raise ParseError(
                f"parameter {key} is already a {shape_of(current).value}, cannot rebind it as {shape.value}",
                token=key,
                expected=shape_of(current).label(),
            )
        self._items[key] = value

    def merge(self, other: "ParameterSet") -> None:
        """Superpone `other` sobre este conjunto (gana `other`)."""

        for key, value in other.items():
            self.set(key, value)

    def pop(self, key: str) -> ParameterValue | None:
        return self._items.pop(key, None)

    def get(self, key: str, default: ParameterValue | None = None) -> ParameterValue | None:
        return self._items.get(key, default)

    def items(self) -> Iterator[tuple[str, ParameterValue]]:
        return iter(list(self._items.items()))

    def keys(self) -> list[str]:
        return list(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"ParameterSet({self._items!r})"

    def to_json(self) -> dict[str, Any]:
        """Cuerpo JSON: claves de parámetro en el nivel superior."""

        return {key: value.to_json() if isinstance(value, Moment) else value for key, value in self._items.items()}

    def to_redacted_json(self) -> dict[str, Any]:
        """Copia para mostrar en consola/CI con los valores sensibles ocultos."""

        body = self.to_json()
        return {key: REDACTED if is_sensitive_key(key) else value for key, value in body.items()}
