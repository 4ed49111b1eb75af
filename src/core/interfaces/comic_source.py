"""Contrato de la fuente upstream de cómics.

Por qué Protocol:
- El servicio depende de la forma (`fetch_latest`/`fetch_by_id`), no de
  httpx; los tests inyectan fuentes falsas sin herencia.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import Comic


@runtime_checkable
class ComicSource(Protocol):
    """Contrato mínimo para un origen de cómics.

    Reglas de diseño:
    - Ambos métodos son asíncronos porque típicamente harán I/O (HTTP).
    - Un fetch = una request; los reintentos son cosa del llamador.
    - Errores: `ComicNotFound` para 404, `UpstreamError` para todo lo demás.
    """

    async def fetch_latest(self) -> Comic:
        """Devuelve el cómic más reciente, ya normalizado."""

        ...

    async def fetch_by_id(self, comic_id: int) -> Comic:
        """Devuelve el cómic `comic_id`, ya normalizado."""

        ...
