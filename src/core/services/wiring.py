"""Construcción del servicio a partir de la configuración.

La CLI y la app HTTP arman el mismo grafo (cliente -> cache -> servicio);
este helper evita que cada entry-point repita los parámetros.
"""

from __future__ import annotations

import httpx

from adapters.xkcd_client import XkcdClient
from core.cache import TTLCache
from core.config import AppSettings
from core.services.comic_service import ComicService


def build_comic_service(
    settings: AppSettings,
    *,
    client: httpx.AsyncClient | None = None,
) -> ComicService:
    source = XkcdClient(settings, client=client)
    cache = TTLCache(settings.cache_ttl_seconds, max_entries=settings.cache_max_entries)
    return ComicService(
        source,
        cache,
        window_size=settings.search_window_size,
        max_concurrency=settings.search_max_concurrency,
        search_timeout_seconds=settings.search_timeout_seconds,
        single_flight=settings.single_flight,
    )
