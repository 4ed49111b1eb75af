"""Traducción de errores del dominio a respuestas HTTP.

- Validación de borde / `InvalidArgument` -> 400
- `ComicNotFound` -> 404
- `UpstreamError` -> 502 (504 si fue timeout)
- Cualquier otra excepción -> 500 sin detalles internos
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.domain.errors import ComicNotFound, InvalidArgument, UpstreamError

logger = logging.getLogger(__name__)

COMIC_ID_MESSAGE = "Comic ID must be a positive integer"
QUERY_MESSAGE = "Query must be between 1 and 100 characters"
PAGE_MESSAGE = "Page must be a positive integer"
LIMIT_MESSAGE = "Limit must be between 1 and 50"

_FIELD_MESSAGES: dict[str, str] = {
    "comic_id": COMIC_ID_MESSAGE,
    "q": QUERY_MESSAGE,
    "page": PAGE_MESSAGE,
    "limit": LIMIT_MESSAGE,
}


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _log_error(request: Request, exc: Exception, *, level: int = logging.WARNING) -> None:
    logger.log(
        level,
        "Error occurred: %s [%s %s request_id=%s]",
        exc,
        request.method,
        request.url.path,
        _request_id(request),
        exc_info=level >= logging.ERROR,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "Validation Error"
    errors = exc.errors()
    if errors:
        loc = errors[0].get("loc") or ()
        field = str(loc[-1]) if loc else ""
        message = _FIELD_MESSAGES.get(field, str(errors[0].get("msg") or message))
    _log_error(request, exc)
    return JSONResponse(status_code=400, content={"error": message})


async def invalid_argument_handler(request: Request, exc: InvalidArgument) -> JSONResponse:
    _log_error(request, exc)
    return JSONResponse(status_code=400, content={"error": exc.message})


async def comic_not_found_handler(request: Request, exc: ComicNotFound) -> JSONResponse:
    _log_error(request, exc, level=logging.INFO)
    return JSONResponse(
        status_code=404,
        content={
            "error": "Comic not found",
            "message": "The requested comic does not exist",
        },
    )


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    _log_error(request, exc)
    return JSONResponse(
        status_code=504 if exc.timed_out else 502,
        content={
            "error": "Upstream Error",
            "message": exc.message,
            "transient": exc.transient,
        },
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    _log_error(request, exc, level=logging.ERROR)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "Something went wrong on our end",
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidArgument, invalid_argument_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ComicNotFound, comic_not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UpstreamError, upstream_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)
