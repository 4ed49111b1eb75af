"""Capa HTTP (FastAPI).

Traduce requests a llamadas del `ComicService` y errores del dominio a
status HTTP. No contiene lógica de cache ni de búsqueda.
"""

from api.app import create_app

__all__ = ["create_app"]
