"""Rate limiting por cliente (SlowAPI, almacenamiento en memoria).

Un `Limiter` por app. El límite se aplica como dependencia de los routers
`/api` (un único bucket compartido por cliente); `/`, `/docs` y
`/openapi.json` quedan fuera.
"""

import logging
from typing import Awaitable, Callable

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from core.config import AppSettings

logger = logging.getLogger(__name__)

API_LIMIT_SCOPE = "api"


def get_client_ip(request: Request) -> str:
    """IP del cliente, respetando X-Forwarded-For detrás de un proxy."""

    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def build_limiter(settings: AppSettings) -> Limiter:
    return Limiter(key_func=get_client_ip, enabled=settings.rate_limit_enabled)


def build_api_rate_limit(limiter: Limiter, settings: AppSettings) -> Callable[[Request], Awaitable[None]]:
    """Dependencia para `include_router(..., dependencies=[Depends(...)])`.

    No depende de recorrer `app.router.routes`: SlowAPI evalúa el límite
    cuando FastAPI resuelve la dependencia de la ruta ya emparejada.
    """

    @limiter.shared_limit(settings.rate_limit, scope=API_LIMIT_SCOPE)
    async def enforce_api_rate_limit(request: Request) -> None:
        return None

    return enforce_api_rate_limit


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning(
        "Rate limit exceeded: %s on %s (%s)",
        get_client_ip(request),
        request.url.path,
        exc.detail,
    )
    return JSONResponse(
        status_code=429,
        content={"error": "Too many requests, please try again later"},
        headers={"Retry-After": "60"},
    )
