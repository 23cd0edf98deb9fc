"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Se construye una sola vez al arrancar y se pasa explícitamente a quien la
  necesite (request builder, cliente HTTP): no hay estado global mutable.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import Credentials
from core.errors import ConfigurationError

ENV_PREFIX = "ANTITHESIS_"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "snouty"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "snouty"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "snouty"
    return Path.home() / ".config" / "snouty"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    username: str = Field(
        ...,
        min_length=1,
        description="Usuario para Basic Auth contra la API de Antithesis.",
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Password para Basic Auth.",
    )
    tenant: str = Field(
        ...,
        min_length=1,
        description="Tenant (subdominio) que define la URL base de los webhooks.",
    )

    base_url: str | None = Field(
        default=None,
        description="Override de la URL base (tests, entornos on-prem).",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout por request (segundos).",
    )

    @property
    def credentials(self) -> Credentials:
        return Credentials(username=self.username, password=self.password, tenant=self.tenant)


def load_settings() -> AppSettings:
    """Lee el entorno y traduce los errores de pydantic a `ConfigurationError`.

    Nombra todas las variables que faltan, no solo la primera.
    """

    try:
        return AppSettings()
    except PydanticValidationError as exc:
        missing: list[str] = []
        invalid: list[str] = []
        for err in exc.errors():
            name = ENV_PREFIX + str(err["loc"][0]).upper() if err.get("loc") else ENV_PREFIX
            if err.get("type") in ("missing", "string_too_short"):
                missing.append(name)
            else:
                invalid.append(f"{name} ({err.get('msg')})")
        if missing:
            raise ConfigurationError("missing environment variable: " + ", ".join(missing)) from exc
        raise ConfigurationError("invalid environment variable: " + ", ".join(invalid)) from exc
