"""Parsers de valores de parámetros (texto crudo -> valor tipado).

Funciones puras: no leen stdin ni entorno. La forma esperada sale del
catálogo (`declared_shape`), de modo que CLI y stdin comparten reglas.
"""

from __future__ import annotations

import math

from core.domain.catalog import declared_shape
from core.domain.models import ParameterValue, ValueShape
from core.domain.moment import parse_moment
from core.errors import ParseError


def parse_integer(raw: str, *, key: str) -> int:
    """Entero decimal, o hexadecimal con prefijo `0x` (JSON5)."""

    text = raw.strip()
    base = 16 if text.lstrip("+-").lower().startswith("0x") else 10
    try:
        return int(text, base)
    except ValueError:
        raise ParseError(
            f"invalid value for {key}: expected integer, got {raw!r}",
            token=raw,
            expected=ValueShape.INTEGER.label(),
        ) from None


def parse_float(raw: str, *, key: str) -> float:
    text = raw.strip()
    try:
        value = float(text)
    except ValueError:
        raise ParseError(
            f"invalid value for {key}: expected float, got {raw!r}",
            token=raw,
            expected=ValueShape.FLOAT.label(),
        ) from None
    if not math.isfinite(value):
        raise ParseError(
            f"invalid value for {key}: {raw!r} is not a finite number",
            token=raw,
            expected=ValueShape.FLOAT.label(),
        )
    return value


def parse_shaped(shape: ValueShape, raw: str, *, key: str) -> ParameterValue:
    if shape is ValueShape.INTEGER:
        return parse_integer(raw, key=key)
    if shape is ValueShape.FLOAT:
        return parse_float(raw, key=key)
    if shape is ValueShape.MOMENT:
        try:
            return parse_moment(raw)
        except ParseError as exc:
            raise ParseError(f"{key}: {exc}", token=raw, expected=shape.label()) from exc
    return raw


def parse_value(key: str, raw: str) -> ParameterValue:
    """Parsea `raw` según la forma declarada para `key` (String por defecto)."""

    return parse_shaped(declared_shape(key), raw, key=key)
