"""Construcción de la petición al webhook (sin enviarla).

Por qué separado del cliente HTTP:
- La forma de la petición (URL, auth, cuerpo) es el contrato con la
  plataforma y se testea sin red.
- El transporte (timeouts, errores de red) vive en `http_client`.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from core.domain.models import Credentials, ParameterSet
from core.errors import UsageError


def default_base_url(tenant: str) -> str:
    return f"https://{tenant}.antithesis.com/api/v1"


def basic_auth_header(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"Basic {token}"


@dataclass(frozen=True)
class WebhookRequest:
    """Descripción completa de la petición saliente; efímera, nunca se persiste."""

    webhook_name: str
    parameters: ParameterSet
    credentials: Credentials
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)

    def content(self) -> bytes:
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


def build_request(
    webhook_name: str,
    params: ParameterSet,
    credentials: Credentials,
    *,
    base_url: str | None = None,
) -> WebhookRequest:
    """POST a `{base_url}/launch/{webhook}` con Basic Auth y cuerpo JSON plano."""

    name = webhook_name.strip()
    if not name:
        raise UsageError("webhook name must not be empty")

    base = (base_url or default_base_url(credentials.tenant)).rstrip("/")
    url = f"{base}/launch/{quote(name, safe='')}"
    headers = {
        "Authorization": basic_auth_header(credentials.username, credentials.password),
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    return WebhookRequest(
        webhook_name=name,
        parameters=params,
        credentials=credentials,
        method="POST",
        url=url,
        headers=headers,
        body=params.to_json(),
    )
