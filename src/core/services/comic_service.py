"""Orquestación: cache + cliente upstream + búsqueda.

Este módulo decide qué pedir al upstream y cuándo reutilizar lo cacheado.
Los errores del cliente y del motor de búsqueda se propagan sin cambios; la
única recuperación local es el atajo por hit de cache.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

from core.cache import LATEST_KEY, TTLCache, comic_key
from core.domain.errors import InvalidArgument
from core.domain.models import Comic, SearchResult
from core.interfaces.comic_source import ComicSource
from core.services.search_engine import DEFAULT_MAX_CONCURRENCY, DEFAULT_WINDOW_SIZE, SearchEngine

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class ComicService:
    """Punto de entrada del core para la capa HTTP y la CLI.

    Una instancia por proceso: se construye explícitamente y se inyecta.
    """

    def __init__(
        self,
        source: ComicSource,
        cache: TTLCache | None = None,
        *,
        rng: random.Random | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        search_timeout_seconds: float | None = None,
        single_flight: bool = True,
    ) -> None:
        self._source = source
        self._cache = cache if cache is not None else TTLCache()
        self._rng = rng or random.Random()
        self._single_flight = single_flight
        self._inflight: dict[str, asyncio.Future[Comic]] = {}
        self._search_engine = SearchEngine(
            latest=self.get_latest,
            lookup=self.get_by_id,
            window_size=window_size,
            max_concurrency=max_concurrency,
            timeout_seconds=search_timeout_seconds,
        )

    @property
    def cache(self) -> TTLCache:
        return self._cache

    @property
    def search_engine(self) -> SearchEngine:
        return self._search_engine

    async def get_latest(self) -> Comic:
        cached = self._cache.get(LATEST_KEY)
        if cached is not None:
            logger.debug("cache hit: %s", LATEST_KEY)
            return cached

        logger.debug("cache miss: %s", LATEST_KEY)
        return await self._load(LATEST_KEY, self._source.fetch_latest)

    async def get_by_id(self, comic_id: int) -> Comic:
        if not _is_positive_int(comic_id):
            raise InvalidArgument("Comic ID must be a positive integer")

        key = comic_key(comic_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit: %s", key)
            return cached

        logger.debug("cache miss: %s", key)
        return await self._load(key, lambda: self._source.fetch_by_id(comic_id))

    async def get_random(self) -> Comic:
        latest = await self.get_latest()
        comic_id = self._rng.randint(1, latest.id)
        logger.debug("random pick %d of %d", comic_id, latest.id)
        return await self.get_by_id(comic_id)

    async def search(
        self,
        query: str,
        page: int | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        page = DEFAULT_PAGE if page is None else page
        limit = DEFAULT_LIMIT if limit is None else limit
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgument("Query must be between 1 and 100 characters")
        if not _is_positive_int(page):
            raise InvalidArgument("Page must be a positive integer")
        if not _is_positive_int(limit):
            raise InvalidArgument("Limit must be a positive integer")
        return await self._search_engine.search(query, page, limit)

    async def _load(self, key: str, fetch: Callable[[], Awaitable[Comic]]) -> Comic:
        if not self._single_flight:
            return self._store(key, await fetch())

        pending = self._inflight.get(key)
        if pending is not None:
            logger.debug("joining in-flight fetch: %s", key)
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._fetch_and_store(key, fetch))
        self._inflight[key] = task
        return await asyncio.shield(task)

    async def _fetch_and_store(self, key: str, fetch: Callable[[], Awaitable[Comic]]) -> Comic:
        try:
            return self._store(key, await fetch())
        finally:
            self._inflight.pop(key, None)

    def _store(self, key: str, comic: Comic) -> Comic:
        self._cache.put(key, comic)
        if key == LATEST_KEY:
            self._cache.put(comic_key(comic.id), comic)
        return comic
