"""Resolución de parámetros: flags CLI o payload por stdin -> `ParameterSet`.

Este módulo concentra todas las reglas de entrada para que la CLI solo tenga
que pasar tokens crudos y un stream:

- sin `--stdin`, solo los flags `--clave valor` pueblan el conjunto;
- con `--stdin`, el stream se lee completo antes de parsear y los flags de
  parámetros quedan prohibidos (no se mezclan fuentes);
- la validación de requeridos corre al final y reporta todas las faltas.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Sequence, TextIO

import json5

from core.domain.catalog import (
    DEBUGGING_INPUT_HASH,
    DEBUGGING_SESSION,
    DEBUGGING_SESSION_ID,
    DEBUGGING_VTIME,
    DECLARED_SHAPES,
    CommandProfile,
    declared_shape,
    is_namespaced,
)
from core.domain.models import Moment, NumberLiteral, ParameterSet, ParameterValue, ValueShape, coerce_float
from core.domain.moment import is_moment_literal, parse_moment
from core.domain.parsers import parse_integer, parse_shaped, parse_value
from core.errors import ParseError, UsageError, ValidationError

logger = logging.getLogger(__name__)


def parse_cli_args(tokens: Iterable[str]) -> list[tuple[str, str]]:
    """Parsea pares `--clave valor` (o `--clave=valor`) preservando el orden."""

    pairs: list[tuple[str, str]] = []
    iterator = iter(tokens)
    for token in iterator:
        if not token.startswith("--"):
            raise UsageError(f"unexpected argument: {token}")
        key = token[2:]
        value: str | None = None
        if "=" in key:
            key, value = key.split("=", 1)
        if not key:
            raise UsageError("empty key after --")
        if value is None:
            value = next(iterator, None)
            if value is None:
                raise UsageError(f"missing value for --{key}")
        pairs.append((key, value))
    return pairs


def params_from_pairs(pairs: Sequence[tuple[str, str]]) -> ParameterSet:
    params = ParameterSet()
    for key, raw in pairs:
        params.set(key, parse_value(key, raw))
    return params


def read_stdin(stream: TextIO) -> str:
    """Lee el stream completo; cualquier fallo de lectura es un error de uso."""

    try:
        data = stream.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise UsageError(f"failed to read stdin: {exc}") from exc
    return data.strip()


def _json_value(key: str, value: Any) -> ParameterValue:
    shape = declared_shape(key)

    if shape is ValueShape.MOMENT:
        if isinstance(value, dict):
            try:
                return Moment.from_mapping(value)
            except ParseError as exc:
                raise ParseError(f"{key}: {exc}", token=exc.token, expected=shape.label()) from exc
        raise ParseError(
            f"invalid value for {key}: expected an object with session_id, input_hash and vtime",
            token=repr(value),
            expected=shape.label(),
        )

    if value is None or isinstance(value, (dict, list)):
        raise ParseError(
            f"invalid value for {key}: expected a {shape.value}, got {json.dumps(value, default=str)}",
            token=repr(value),
            expected=shape.label(),
        )

    if isinstance(value, bool):
        if shape is ValueShape.STRING:
            return "true" if value else "false"
        raise ParseError(f"invalid value for {key}: expected {shape.value}, got {value!r}", token=repr(value), expected=shape.label())

    if isinstance(value, NumberLiteral):
        return _json_number(key, shape, value)

    if isinstance(value, str):
        return parse_shaped(shape, value, key=key)

    raise ParseError(f"invalid value for {key}: unsupported JSON value {value!r}", token=repr(value), expected=shape.label())


def _json_number(key: str, shape: ValueShape, literal: NumberLiteral) -> ParameterValue:
    # Las claves String declaradas guardan el literal tal cual (input_hash).
    if shape is ValueShape.STRING and key in DECLARED_SHAPES:
        return str(literal)
    if shape is ValueShape.FLOAT or not literal.is_integral:
        return coerce_float(literal, field=key)
    return parse_integer(literal, key=key)


def _number_literal(text: str, base: int = 10) -> NumberLiteral:
    return NumberLiteral(text)


def params_from_json(text: str) -> ParameterSet:
    """Parsea un objeto JSON5 plano `{"clave.con.puntos": valor}`.

    JSON5 admite comas finales, comentarios, claves sin comillas y comillas
    simples, habituales en payloads escritos a mano. Los números llegan como
    `NumberLiteral` y cada clave decide su forma.
    """

    try:
        payload = json5.loads(
            text,
            parse_float=_number_literal,
            parse_int=_number_literal,
            parse_constant=_number_literal,
        )
    except ValueError as exc:
        raise ParseError(f"invalid JSON on stdin: {exc}", token=text[:80], expected="JSON object") from exc
    if not isinstance(payload, dict):
        raise ParseError("invalid JSON on stdin: expected a JSON object", token=text[:80], expected="JSON object")

    params = ParameterSet()
    for key, value in payload.items():
        params.set(key, _json_value(key, value))
    logger.debug("parsed %d params from JSON", len(params))
    return params


def params_from_moment(moment: Moment) -> ParameterSet:
    return ParameterSet(
        {
            DEBUGGING_SESSION_ID: moment.session_id,
            DEBUGGING_INPUT_HASH: moment.input_hash,
            DEBUGGING_VTIME: moment.vtime,
        }
    )


def _expand_session(params: ParameterSet) -> None:
    """Reemplaza `antithesis.debugging.session` por sus tres campos individuales."""

    moment = params.pop(DEBUGGING_SESSION)
    if not isinstance(moment, Moment):
        return
    expanded = params_from_moment(moment)
    conflicts = [
        key for key, value in expanded.items() if key in params and params.get(key) != value
    ]
    if conflicts:
        raise UsageError(
            f"{DEBUGGING_SESSION} conflicts with explicitly supplied parameters: {', '.join(conflicts)}"
        )
    params.merge(expanded)


def resolve_parameters(
    profile: CommandProfile,
    tokens: Sequence[str],
    *,
    use_stdin: bool = False,
    stdin: TextIO | None = None,
) -> ParameterSet:
    """Construye el `ParameterSet` final de un subcomando (sin validar requeridos)."""

    pairs = parse_cli_args(tokens)

    if use_stdin:
        if pairs:
            flags = ", ".join(f"--{key}" for key, _ in pairs)
            kind = "parameter flags" if any(is_namespaced(k) for k, _ in pairs) else "extra flags"
            raise UsageError(f"--stdin cannot be combined with {kind}: {flags}")
        if stdin is None:
            raise UsageError("failed to read stdin: no stream available")
        text = read_stdin(stdin)
        if profile.accepts_moment and is_moment_literal(text):
            logger.debug("detected Moment.from on stdin")
            params = params_from_moment(parse_moment(text))
        else:
            logger.debug("parsing stdin as JSON")
            params = params_from_json(text)
    else:
        params = params_from_pairs(pairs)

    if profile.accepts_moment and DEBUGGING_SESSION in params:
        _expand_session(params)
    return params


def validate_parameters(profile: CommandProfile, params: ParameterSet) -> None:
    """Verifica presencia de requeridos y claves admitidas; reporta todo junto."""

    missing = [key for key in profile.required if key not in params]
    unexpected = [key for key in params.keys() if not profile.is_allowed(key)]
    if missing or unexpected:
        logger.debug("validation failed: missing=%s unexpected=%s", missing, unexpected)
        raise ValidationError(missing=missing, unexpected=unexpected)
    logger.debug("validation passed")
