"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Todo lo informativo va a stderr; stdout queda para la respuesta de la
  plataforma (útil en pipelines).
"""

from __future__ import annotations

from datetime import datetime, timedelta

from rich.console import Console
from rich.text import Text

from core.domain.catalog import RUN, CommandProfile
from core.domain.models import ParameterSet


def print_params(console: Console, profile: CommandProfile, params: ParameterSet) -> None:
    """Muestra los parámetros resueltos (con valores sensibles ocultos)."""

    console.print()
    console.print(Text(profile.banner, style="bold cyan"))
    console.print_json(data=params.to_redacted_json(), indent=2)


def print_error(console: Console, message: str) -> None:
    text = Text("error: ", style="bold red")
    text.append(message)
    console.print(text, soft_wrap=True)


def eta_minutes(profile: CommandProfile, params: ParameterSet) -> int:
    """Minutos estimados hasta el email de la plataforma."""

    if profile is RUN:
        duration = params.get("antithesis.duration")
        if isinstance(duration, (int, float)):
            return int(duration) + profile.eta_minutes
    return profile.eta_minutes


def build_eta_message(profile: CommandProfile, params: ParameterSet, now: datetime | None = None) -> str:
    now = now or datetime.now()
    eta = now + timedelta(minutes=eta_minutes(profile, params))
    what = "report" if profile is RUN else "debugging session"
    return f"Expect a {what} email from Antithesis around {eta.strftime('%b %d at %I:%M %p')}"
