"""Contadores de uso del proceso (requests totales y por endpoint).

Se construye una sola vez al arrancar la app y se inyecta en el camino de
cada request; no hay estado global de módulo.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable


class RequestStats:
    """Acumulador compartido protegido por un lock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at = clock()
        self._lock = threading.Lock()
        self._total = 0
        self._by_endpoint: dict[str, int] = {}

    def record(self, endpoint: str) -> None:
        with self._lock:
            self._total += 1
            self._by_endpoint[endpoint] = self._by_endpoint.get(endpoint, 0) + 1

    @property
    def total_requests(self) -> int:
        with self._lock:
            return self._total

    def uptime_seconds(self) -> float:
        return max(0.0, self._clock() - self._started_at)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "totalRequests": self._total,
                "endpointStats": dict(self._by_endpoint),
                "uptime": round(self.uptime_seconds(), 3),
            }
