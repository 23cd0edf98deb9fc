"""Jerarquía de excepciones del proyecto.

Todas las fallas son terminales para la invocación: la CLI las captura en un
único punto, imprime `error: <mensaje>` y sale con código 1.
"""

from __future__ import annotations

from typing import Sequence


class SnoutyError(Exception):
    """Base for all snouty exceptions."""


class ConfigurationError(SnoutyError):
    """Missing or invalid environment configuration."""


class UsageError(SnoutyError):
    """The command line (or stdin) was used in an unsupported way."""


class ParseError(SnoutyError):
    """A raw value did not match the shape declared for its parameter."""

    def __init__(self, message: str, *, token: str | None = None, expected: str | None = None) -> None:
        super().__init__(message)
        self.token = token
        self.expected = expected


class ValidationError(SnoutyError):
    """Required parameters are missing, or forbidden ones are present.

    Reporta *todas* las claves faltantes de una vez para que el usuario pueda
    corregirlas en una sola pasada.
    """

    def __init__(self, missing: Sequence[str] = (), unexpected: Sequence[str] = ()) -> None:
        self.missing = list(missing)
        self.unexpected = list(unexpected)
        problems: list[str] = []
        if self.missing:
            problems.append("missing required parameters: " + ", ".join(self.missing))
        if self.unexpected:
            problems.append("unexpected parameters: " + ", ".join(self.unexpected))
        super().__init__("validation failed: " + "; ".join(problems))


class TransportError(SnoutyError):
    """The request could not be delivered, or the platform rejected it."""

    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
