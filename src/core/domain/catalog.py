"""Catálogo de parámetros conocidos y perfiles de comando.

Fuente única de verdad para:
- la forma declarada de cada parámetro (p.ej. `antithesis.duration` es Float);
- qué claves exige cada subcomando y cuáles admite.

Ninguna clave declara `ValueShape.INTEGER`: es la forma que toman los números
enteros de stdin en claves no declaradas.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.domain.models import ValueShape

DEBUGGING_PREFIX = "antithesis.debugging."
DEBUGGING_SESSION = "antithesis.debugging.session"
DEBUGGING_SESSION_ID = "antithesis.debugging.session_id"
DEBUGGING_INPUT_HASH = "antithesis.debugging.input_hash"
DEBUGGING_VTIME = "antithesis.debugging.vtime"

DECLARED_SHAPES: dict[str, ValueShape] = {
    "antithesis.duration": ValueShape.FLOAT,
    DEBUGGING_SESSION_ID: ValueShape.STRING,
    DEBUGGING_INPUT_HASH: ValueShape.STRING,
    DEBUGGING_VTIME: ValueShape.FLOAT,
    DEBUGGING_SESSION: ValueShape.MOMENT,
}


def declared_shape(key: str) -> ValueShape:
    """Forma declarada de `key`; las claves desconocidas son String."""

    return DECLARED_SHAPES.get(key, ValueShape.STRING)


def is_namespaced(key: str) -> bool:
    return "." in key


@dataclass(frozen=True)
class CommandProfile:
    """Parámetros requeridos/admitidos por un subcomando."""

    name: str
    required: tuple[str, ...]
    default_webhook: str | None = None
    # None = cualquier clave es válida.
    allowed_prefixes: tuple[str, ...] | None = None
    accepts_moment: bool = False
    eta_minutes: int = 10
    banner: str = ""

    def is_allowed(self, key: str) -> bool:
        if self.allowed_prefixes is None:
            return True
        return any(key.startswith(prefix) for prefix in self.allowed_prefixes)


RUN = CommandProfile(
    name="run",
    required=(
        "antithesis.test_name",
        "antithesis.config_image",
        "antithesis.images",
        "antithesis.duration",
    ),
    banner="Requesting Antithesis test run with params:",
)

DEBUG = CommandProfile(
    name="debug",
    required=(DEBUGGING_SESSION_ID, DEBUGGING_INPUT_HASH, DEBUGGING_VTIME),
    default_webhook="debugging",
    allowed_prefixes=(DEBUGGING_PREFIX, "antithesis.report."),
    accepts_moment=True,
    banner="Requesting the Antithesis multiverse debugger with params:",
)

PROFILES: dict[str, CommandProfile] = {RUN.name: RUN, DEBUG.name: DEBUG}
