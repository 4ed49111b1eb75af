"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- El Core depende de abstracciones, no del cliente HTTP.
"""

from core.interfaces.comic_source import ComicSource

__all__ = ["ComicSource"]
