"""Fábrica de la aplicación FastAPI.

`create_app()` arma una app independiente: su propio `RequestStats`, su
propio `Limiter` y, si no se inyecta un servicio, un `ComicService` con un
`httpx.AsyncClient` compartido que vive lo que dura el lifespan.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from slowapi.errors import RateLimitExceeded

from adapters.http_client import build_async_client
from api.errors import register_error_handlers
from api.middleware import RequestLoggingMiddleware, RequestStatsMiddleware, SecurityHeadersMiddleware
from api.rate_limit import build_api_rate_limit, build_limiter, rate_limit_exceeded_handler
from api.routes import comics_router, system_router
from core.config import AppSettings
from core.logging_config import configure_logging
from core.services.comic_service import ComicService
from core.services.wiring import build_comic_service
from core.stats import RequestStats

logger = logging.getLogger(__name__)

_INDEX_HTML = """<!doctype html>
<html lang="en">
<head><meta charset="utf-8"><title>xkcd-proxy</title></head>
<body>
<h1>xkcd-proxy</h1>
<ul>
<li><code>GET /api/comics/latest</code> - newest comic</li>
<li><code>GET /api/comics/{id}</code> - comic by number</li>
<li><code>GET /api/comics/random</code> - random comic</li>
<li><code>GET /api/comics/search?q=&amp;page=&amp;limit=</code> - search the most recent comics</li>
<li><code>GET /api/health</code> - liveness</li>
<li><code>GET /api/stats</code> - request counters</li>
</ul>
</body>
</html>
"""


def create_app(
    settings: AppSettings | None = None,
    *,
    service: ComicService | None = None,
    stats: RequestStats | None = None,
) -> FastAPI:
    settings = settings or AppSettings()
    stats = stats or RequestStats()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if service is not None:
            app.state.comic_service = service
            yield
            return

        async with build_async_client(settings) as client:
            app.state.comic_service = build_comic_service(settings, client=client)
            logger.info("Comic service ready (upstream=%s)", settings.upstream_base_url)
            yield
        logger.info("Upstream client closed")

    app = FastAPI(
        title="xkcd-proxy",
        version="0.1.0",
        description="Cached lookup, random pick and recent-window search over the xkcd archive.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.stats = stats
    if service is not None:
        app.state.comic_service = service

    limiter = build_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]
    register_error_handlers(app)

    # El último middleware agregado es el más externo: los headers de
    # seguridad también cubren el 500 que arma `RequestLoggingMiddleware`.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestStatsMiddleware, stats=stats)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def index() -> str:
        return _INDEX_HTML

    api_dependencies = [Depends(build_api_rate_limit(limiter, settings))]
    app.include_router(comics_router, dependencies=api_dependencies)
    app.include_router(system_router, dependencies=api_dependencies)
    return app


def create_default_app() -> FastAPI:
    """Factory para `uvicorn --factory` (lee la configuración del entorno)."""

    settings = AppSettings()
    configure_logging(settings.log_level)
    return create_app(settings)
