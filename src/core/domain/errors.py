"""Taxonomía de errores del servicio de cómics.

Reglas:
- `message` es seguro para mostrar al usuario final.
- `UpstreamError.detail` guarda la causa de bajo nivel (socket, DNS, JSON)
  solo para logs; la capa HTTP nunca la expone.
"""

from __future__ import annotations


class ComicServiceError(Exception):
    """Base de todos los errores que produce el core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidArgument(ComicServiceError):
    """Entrada malformada que llegó al core pese a la validación de borde."""


class ComicNotFound(ComicServiceError):
    """El upstream confirmó que el identificador no existe."""

    def __init__(self, comic_id: int | str) -> None:
        super().__init__(f"Comic not found: {comic_id}")
        self.comic_id = comic_id


class UpstreamError(ComicServiceError):
    """Upstream inalcanzable, lento, o con una respuesta inesperada."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
        detail: str | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.detail = detail
        self.timed_out = timed_out

    @property
    def transient(self) -> bool:
        """True si reintentar más tarde tiene sentido (timeout, red, 429, 5xx)."""

        if self.timed_out or self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message
