"""Wrapper de httpx.

Por qué un wrapper:
- Estandariza timeouts, headers y el mapeo de errores de red a `TransportError`.
- Facilita testeo: se puede inyectar un `httpx.MockTransport`.

Sin reintentos: una invocación envía exactamente una petición.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from adapters.request_builder import WebhookRequest
from core.config import AppSettings
from core.errors import TransportError

logger = logging.getLogger(__name__)

USER_AGENT = "snouty (+https://antithesis.com)"


@dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: str


def build_async_client(
    settings: AppSettings,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todos los comandos se comporten igual.
    """

    headers: dict[str, str] = {"User-Agent": USER_AGENT}
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=False,
        headers=headers,
        transport=transport,
    )


async def send_webhook(
    request: WebhookRequest,
    settings: AppSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> WebhookResponse:
    """Envía la petición y devuelve la respuesta si es 2xx.

    Cualquier otro resultado (red, timeout, status no exitoso) -> `TransportError`
    con el status y el cuerpo para diagnosticar.
    """

    try:
        async with build_async_client(settings, transport=transport) as client:
            response = await client.request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.content(),
            )
    except httpx.HTTPError as exc:
        raise TransportError(f"HTTP request failed: {exc}") from exc

    body = response.text
    logger.debug("response status: %s, body length: %d", response.status_code, len(body))
    if not response.is_success:
        raise TransportError(
            f"API error: {response.status_code} - {body}",
            status_code=response.status_code,
            body=body,
        )
    return WebhookResponse(status_code=response.status_code, body=body)
