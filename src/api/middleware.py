"""Middlewares HTTP: logging por request, estadísticas y headers de seguridad."""

from __future__ import annotations

import logging
import secrets
import string
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from api.errors import unhandled_error_handler
from api.routes import UNMATCHED_ROUTE_NAME
from core.stats import RequestStats

logger = logging.getLogger(__name__)

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits
REQUEST_ID_LENGTH = 9


def new_request_id() -> str:
    return "".join(secrets.choice(_REQUEST_ID_ALPHABET) for _ in range(REQUEST_ID_LENGTH))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Asigna un request id, registra la entrada y la salida de cada request.

    Una excepción no manejada se traduce acá a 500, para que la respuesta
    conserve `X-Request-ID` y pase por el resto de los middlewares.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id
        request.state.start_time = time.perf_counter()

        logger.info(
            "Incoming request id=%s method=%s url=%s ip=%s user_agent=%s",
            request_id,
            request.method,
            request.url.path,
            request.client.host if request.client else None,
            request.headers.get("user-agent"),
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            response = await unhandled_error_handler(request, exc)

        elapsed_ms = (time.perf_counter() - request.state.start_time) * 1000
        logger.info(
            "Completed request id=%s status=%s duration_ms=%.1f",
            request_id,
            response.status_code,
            elapsed_ms,
        )
        response.headers["X-Request-ID"] = request_id
        return response


class RequestStatsMiddleware(BaseHTTPMiddleware):
    """Cuenta cada request por `"<METHOD> <route template>"`.

    Se registra después de despachar: FastAPI deja la ruta emparejada en
    `scope["route"]`. Sin ruta, o con el catch-all de `/api`, se usa el path
    crudo.
    """

    def __init__(self, app: ASGIApp, stats: RequestStats) -> None:
        super().__init__(app)
        self._stats = stats

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        finally:
            self._stats.record(f"{request.method} {self._route_template(request)}")

    @staticmethod
    def _route_template(request: Request) -> str:
        route = request.scope.get("route")
        template = getattr(route, "path", None)
        if not template or getattr(route, "name", None) == UNMATCHED_ROUTE_NAME:
            return request.url.path
        return template


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
        "Cross-Origin-Resource-Policy": "same-origin",
    }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response
