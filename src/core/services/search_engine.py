"""Búsqueda por palabra clave sobre una ventana reciente del archivo.

No hay índice del archivo completo: cada búsqueda examina solo los
`window_size` cómics más recientes (más reciente primero), resolviendo cada
uno a través del camino con cache del servicio. Es una aproximación con
costo acotado, no un full-text.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from core.domain.errors import ComicNotFound, UpstreamError
from core.domain.models import Comic, Pagination, SearchResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 100
DEFAULT_MAX_CONCURRENCY = 10

LatestLookup = Callable[[], Awaitable[Comic]]
ComicLookup = Callable[[int], Awaitable[Comic]]


def scan_window(max_id: int, window_size: int) -> range:
    """Identificadores a examinar, en orden descendente."""

    low = max(1, max_id - window_size + 1)
    return range(max_id, low - 1, -1)


class SearchEngine:
    def __init__(
        self,
        *,
        latest: LatestLookup,
        lookup: ComicLookup,
        window_size: int = DEFAULT_WINDOW_SIZE,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout_seconds: float | None = None,
    ) -> None:
        if window_size < 1:
            raise ValueError("window_size must be >= 1")
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._latest = latest
        self._lookup = lookup
        self._window_size = window_size
        self._max_concurrency = max_concurrency
        self._timeout = timeout_seconds

    @property
    def window_size(self) -> int:
        return self._window_size

    async def search(self, query: str, page: int, limit: int) -> SearchResult:
        if self._timeout is None:
            matches = await self._scan(query)
        else:
            try:
                matches = await asyncio.wait_for(self._scan(query), timeout=self._timeout)
            except asyncio.TimeoutError as exc:
                raise UpstreamError(
                    "Search timed out while scanning recent comics",
                    detail=f"scan exceeded {self._timeout}s",
                    timed_out=True,
                ) from exc

        pagination = Pagination.for_page(page, limit)
        page_slice = matches[pagination.offset : pagination.offset + limit]
        return SearchResult(
            query=query,
            results=page_slice,
            total=len(matches),
            pagination=pagination,
        )

    async def _scan(self, query: str) -> list[Comic]:
        latest = await self._latest()
        ids = scan_window(latest.id, self._window_size)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def resolve(comic_id: int) -> Comic | Exception:
            async with semaphore:
                try:
                    return await self._lookup(comic_id)
                except (ComicNotFound, UpstreamError) as exc:
                    return exc

        resolved = await asyncio.gather(*(resolve(comic_id) for comic_id in ids))

        needle = query.lower()
        matches: list[Comic] = []
        found_any = False
        last_upstream_error: UpstreamError | None = None
        skipped = 0
        for item in resolved:
            if isinstance(item, Comic):
                found_any = True
                if item.matches(needle):
                    matches.append(item)
                continue
            skipped += 1
            if isinstance(item, UpstreamError):
                last_upstream_error = item

        if skipped:
            logger.debug("Search %r skipped %d unresolved ids", query, skipped)
        if not found_any and last_upstream_error is not None:
            raise last_upstream_error
        return matches
