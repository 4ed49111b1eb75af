"""Cliente upstream: archivo xkcd (`info.0.json`).

Responsabilidad:
- Una request por llamada a `{base}/info.0.json` o `{base}/{id}/info.0.json`.
- Traducir resultados HTTP/transporte a la taxonomía del dominio.
- Normalizar el payload crudo a `Comic` (una sola vez, aquí).

No toca la cache ni reintenta.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.domain.errors import ComicNotFound, UpstreamError
from core.domain.models import Comic, UpstreamComicPayload
from core.interfaces.comic_source import ComicSource

logger = logging.getLogger(__name__)


class XkcdClient(ComicSource):
    """Implementa `ComicSource` contra la API JSON pública de xkcd."""

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._base_url = self._settings.upstream_base_url.rstrip("/")

    def latest_url(self) -> str:
        return f"{self._base_url}/info.0.json"

    def comic_url(self, comic_id: int) -> str:
        return f"{self._base_url}/{comic_id}/info.0.json"

    async def fetch_latest(self) -> Comic:
        return await self._fetch(self.latest_url(), label="latest comic")

    async def fetch_by_id(self, comic_id: int) -> Comic:
        comic = await self._fetch(
            self.comic_url(comic_id),
            label=f"comic {comic_id}",
            comic_id=comic_id,
        )
        if comic.id != comic_id:
            raise UpstreamError(
                f"Failed to fetch comic {comic_id}: upstream answered with comic {comic.id}",
                status_code=200,
            )
        return comic

    async def _get(self, url: str) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(url)
        async with build_async_client(self._settings) as client:
            return await client.get(url)

    async def _fetch(self, url: str, *, label: str, comic_id: int | None = None) -> Comic:
        logger.debug("GET %s", url)
        try:
            resp = await self._get(url)
        except httpx.TimeoutException as exc:
            logger.warning("Upstream timeout fetching %s: %r", label, exc)
            raise UpstreamError(
                f"Failed to fetch {label}: upstream timed out",
                detail=repr(exc),
                timed_out=True,
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Upstream transport failure fetching %s: %r", label, exc)
            raise UpstreamError(
                f"Failed to fetch {label}: upstream unreachable",
                detail=str(exc) or exc.__class__.__name__,
            ) from exc

        if resp.status_code == 404:
            raise ComicNotFound(comic_id if comic_id is not None else "latest")

        if not resp.is_success:
            reason = resp.reason_phrase or ""
            message = f"Failed to fetch {label}: HTTP {resp.status_code}"
            if reason:
                message = f"{message}: {reason}"
            logger.warning("Upstream HTTP %s fetching %s", resp.status_code, label)
            raise UpstreamError(
                message,
                status_code=resp.status_code,
                reason=reason,
            )

        try:
            payload = UpstreamComicPayload.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Upstream sent an unusable payload for %s", label)
            raise UpstreamError(
                f"Failed to fetch {label}: malformed upstream payload",
                status_code=resp.status_code,
                detail=str(exc),
            ) from exc

        return payload.to_comic()
