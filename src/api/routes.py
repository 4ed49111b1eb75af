"""Rutas HTTP.

El orden importa: `/latest`, `/random` y `/search` se registran antes de
`/{comic_id}` para que no sean capturadas como identificadores.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, Path, Query, Request, Response
from fastapi.responses import JSONResponse

from api.errors import QUERY_MESSAGE
from core.domain.errors import InvalidArgument
from core.domain.models import Comic, SearchResult
from core.services.comic_service import ComicService
from core.stats import RequestStats

MAX_QUERY_LENGTH = 100
MAX_PAGE_LIMIT = 50
UNMATCHED_ROUTE_NAME = "unknown_endpoint"


def get_service(request: Request) -> ComicService:
    return request.app.state.comic_service


def get_stats(request: Request) -> RequestStats:
    return request.app.state.stats


comics_router = APIRouter(prefix="/api/comics", tags=["comics"])
system_router = APIRouter(prefix="/api", tags=["system"])


@comics_router.get("/latest", response_model=Comic)
async def latest_comic(service: ComicService = Depends(get_service)) -> Comic:
    return await service.get_latest()


@comics_router.get("/random", response_model=Comic)
async def random_comic(service: ComicService = Depends(get_service)) -> Comic:
    return await service.get_random()


@comics_router.get("/search", response_model=SearchResult)
async def search_comics(
    q: str | None = Query(default=None, description="Texto a buscar (1-100 caracteres)."),
    page: int | None = Query(default=None, ge=1),
    limit: int | None = Query(default=None, ge=1, le=MAX_PAGE_LIMIT),
    service: ComicService = Depends(get_service),
) -> SearchResult:
    query = (q or "").strip()
    if not 1 <= len(query) <= MAX_QUERY_LENGTH:
        raise InvalidArgument(QUERY_MESSAGE)
    return await service.search(query, page, limit)


@comics_router.get("/{comic_id}", response_model=Comic)
async def comic_by_id(
    comic_id: int = Path(..., gt=0),
    service: ComicService = Depends(get_service),
) -> Comic:
    return await service.get_by_id(comic_id)


@system_router.get("/health")
async def health(stats: RequestStats = Depends(get_stats)) -> dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": stats.uptime_seconds(),
    }


@system_router.get("/stats")
async def usage_stats(stats: RequestStats = Depends(get_stats)) -> dict[str, Any]:
    return stats.snapshot()


@system_router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    name=UNMATCHED_ROUTE_NAME,
    include_in_schema=False,
)
async def unknown_endpoint(request: Request, path: str) -> Response:
    if request.method == "OPTIONS":
        return Response(status_code=204, headers={"Allow": "GET, OPTIONS"})

    if "json" in request.headers.get("content-type", ""):
        body = await request.body()
        if body:
            try:
                json.loads(body)
            except ValueError:
                return JSONResponse(status_code=400, content={"error": "Invalid JSON payload"})

    return JSONResponse(
        status_code=404,
        content={"error": "Endpoint not found", "path": request.url.path},
    )
