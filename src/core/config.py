"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI
  ni la capa HTTP.
- Adaptadores (cliente upstream), servicios (cache/búsqueda) y la API leen
  la misma configuración.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "xkcd-proxy"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "xkcd-proxy"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "xkcd-proxy"
    return Path.home() / ".config" / "xkcd-proxy"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Todas las variables usan el prefijo `XKCD_PROXY_`
    (p.ej. `XKCD_PROXY_CACHE_TTL_SECONDS=60`).
    """

    model_config = SettingsConfigDict(
        env_prefix="XKCD_PROXY_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    upstream_base_url: str = Field(
        default="https://xkcd.com",
        min_length=8,
        description="Base URL del archivo upstream (sin slash final).",
    )
    http_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Timeout por request al upstream (segundos).",
    )
    user_agent: str = Field(
        default="xkcd-proxy/0.1 (+https://local)",
        min_length=1,
        description="User-Agent para peticiones al upstream.",
    )

    cache_ttl_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Tiempo de vida de cada entrada de cache (segundos).",
    )
    cache_max_entries: int | None = Field(
        default=None,
        ge=1,
        description="Límite LRU opcional de entradas en cache (None = sin límite).",
    )
    single_flight: bool = Field(
        default=True,
        description="Colapsa fetches concurrentes de la misma clave en uno solo.",
    )

    search_window_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Cantidad de cómics recientes examinados por la búsqueda.",
    )
    search_max_concurrency: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Lookups concurrentes máximos durante un escaneo de búsqueda.",
    )
    search_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Duración máxima de un escaneo de búsqueda completo (segundos).",
    )

    rate_limit_enabled: bool = Field(
        default=True,
        description="Activa el rate limiting por cliente en /api.",
    )
    rate_limit: str = Field(
        default="100/15 minutes",
        min_length=3,
        description="Límite por cliente en notación de `limits` (p.ej. '100/15 minutes').",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging raíz (DEBUG, INFO, WARNING...).",
    )
    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=3000, ge=1, le=65535)
