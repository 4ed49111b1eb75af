"""Cache en memoria con TTL para cómics.

Reglas:
- Expiración perezosa: una entrada vencida se lee como ausente y se
  reemplaza en el siguiente `put` de la misma clave. No hay barrido.
- `put` sustituye la entrada completa; nunca se muta una entrada existente.
- El lock protege solo el diccionario interno y jamás se sostiene durante
  I/O, así que es seguro desde corrutinas y desde hilos.
"""

from __future__ import annotations

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable

from core.domain.models import Comic

LATEST_KEY = "latest"
DEFAULT_TTL_SECONDS = 300.0


def comic_key(comic_id: int) -> str:
    return str(comic_id)


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Comic
    fetched_at: float


class TTLCache:
    """Mapa clave -> `CacheEntry` con validez `now - fetched_at < ttl`.

    `max_entries` activa un límite LRU opcional; sin él, el tamaño queda
    acotado por el working set (ventana de búsqueda + lookups directos).
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.fetched_at < self._ttl

    def get(self, key: str) -> Comic | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not self._is_fresh(entry, self._clock()):
                return None
            self._entries.move_to_end(key)
            return entry.value

    def entry(self, key: str) -> CacheEntry | None:
        """Entrada cruda (incluso vencida), sin tocar el orden LRU."""

        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, comic: Comic) -> CacheEntry:
        with self._lock:
            entry = CacheEntry(key=key, value=comic, fetched_at=self._clock())
            self._entries[key] = entry
            self._entries.move_to_end(key)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)
            return entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        return self.get(key) is not None
