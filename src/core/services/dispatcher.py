"""Orquestación de un subcomando (`run` / `debug`).

Cada invocación es una pequeña máquina de estados:

    collecting-input -> resolved -> request-built -> completed | failed

La CLI solo aporta tokens crudos, el stream de stdin y callbacks de UI; todo
el flujo (resolver, validar, construir, enviar) vive aquí para poder
reutilizarlo y testearlo sin Typer.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence, TextIO

import httpx

from adapters.http_client import WebhookResponse, send_webhook
from adapters.request_builder import WebhookRequest, build_request
from core.config import AppSettings, load_settings
from core.domain.catalog import CommandProfile
from core.domain.models import ParameterSet
from core.errors import SnoutyError, UsageError
from core.services.input_resolver import resolve_parameters, validate_parameters

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    COLLECTING_INPUT = "collecting-input"
    RESOLVED = "resolved"
    REQUEST_BUILT = "request-built"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[RunState, tuple[RunState, ...]] = {
    RunState.COLLECTING_INPUT: (RunState.RESOLVED, RunState.FAILED),
    RunState.RESOLVED: (RunState.REQUEST_BUILT, RunState.FAILED),
    RunState.REQUEST_BUILT: (RunState.COMPLETED, RunState.FAILED),
    RunState.COMPLETED: (),
    RunState.FAILED: (),
}


@dataclass
class DispatchHooks:
    """Optional callbacks for UI layers."""

    params_resolved: Callable[[CommandProfile, ParameterSet], None] | None = None


@dataclass
class CommandRun:
    """Estado de una invocación de subcomando."""

    profile: CommandProfile
    webhook: str
    state: RunState = RunState.COLLECTING_INPUT
    params: ParameterSet | None = None
    request: WebhookRequest | None = None
    response: WebhookResponse | None = None
    error: SnoutyError | None = field(default=None, repr=False)

    def advance(self, state: RunState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"invalid transition {self.state.value} -> {state.value}")
        logger.debug("%s: %s -> %s", self.profile.name, self.state.value, state.value)
        self.state = state


def resolve_webhook(profile: CommandProfile, webhook: str | None) -> str:
    name = (webhook or profile.default_webhook or "").strip()
    if not name:
        raise UsageError(f"{profile.name} requires a webhook name (-w/--webhook)")
    return name


def dispatch(
    profile: CommandProfile,
    *,
    webhook: str | None,
    tokens: Sequence[str],
    use_stdin: bool = False,
    stdin: TextIO | None = None,
    settings: AppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    hooks: DispatchHooks | None = None,
) -> CommandRun:
    """Ejecuta el subcomando completo y devuelve el `CommandRun` terminado.

    Los errores del dominio no se propagan: quedan en `run.error` con el
    estado `failed`, y la CLI decide el código de salida.
    """

    hooks = hooks or DispatchHooks()
    run = CommandRun(profile=profile, webhook=webhook or profile.default_webhook or "")
    try:
        run.webhook = resolve_webhook(profile, webhook)
        params = resolve_parameters(profile, tokens, use_stdin=use_stdin, stdin=stdin)
        validate_parameters(profile, params)
        run.params = params
        run.advance(RunState.RESOLVED)

        if hooks.params_resolved:
            hooks.params_resolved(profile, params)

        if settings is None:
            settings = load_settings()
        run.request = build_request(run.webhook, params, settings.credentials, base_url=settings.base_url)
        run.advance(RunState.REQUEST_BUILT)

        logger.info("POST %s", run.request.url)
        run.response = asyncio.run(send_webhook(run.request, settings, transport=transport))
        run.advance(RunState.COMPLETED)
    except SnoutyError as exc:
        run.error = exc
        run.advance(RunState.FAILED)
    return run
