"""Modelos del dominio (Pydantic v2).

Nota:
- Estos modelos describen *qué* es un cómic y un resultado de búsqueda, no
  *cómo* se obtienen.
- Los nombres de campo serializados (`img`, `alt`, `safe_title`...) son el
  contrato público que consumen los clientes existentes.
"""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Comic(BaseModel):
    """Un cómic normalizado. Inmutable una vez creado."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(
        ...,
        gt=0,
        description="Número canónico del cómic en el upstream.",
    )
    title: str = Field(..., description="Título para mostrar.")
    img: str = Field(..., description="URL absoluta de la imagen.")
    alt: str = Field(default="", description="Texto alternativo corto.")
    transcript: str = Field(
        default="",
        description="Transcripción libre; cadena vacía si el upstream no la trae.",
    )
    year: str = Field(default="", description="Año tal como lo envía el upstream.")
    month: str = Field(default="", description="Mes sin padding, como en el upstream.")
    day: str = Field(default="", description="Día sin padding, como en el upstream.")
    safe_title: str = Field(default="", description="Título sin markup.")

    def matches(self, needle: str) -> bool:
        """Substring case-insensitive sobre título y transcripción.

        `needle` debe llegar ya en minúsculas.
        """

        return needle in self.title.lower() or needle in self.transcript.lower()


class UpstreamComicPayload(BaseModel):
    """Documento crudo `info.0.json` tal como lo sirve el upstream."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    num: int = Field(..., gt=0)
    title: str
    img: str
    alt: str = ""
    transcript: str | None = None
    year: str = ""
    month: str = ""
    day: str = ""
    safe_title: str = ""

    def to_comic(self) -> Comic:
        return Comic(
            id=self.num,
            title=self.title,
            img=self.img,
            alt=self.alt,
            transcript=self.transcript or "",
            year=self.year,
            month=self.month,
            day=self.day,
            safe_title=self.safe_title,
        )


class Pagination(BaseModel):
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)
    offset: int = Field(..., ge=0)

    @classmethod
    def for_page(cls, page: int, limit: int) -> "Pagination":
        return cls(page=page, limit=limit, offset=(page - 1) * limit)


class SearchResult(BaseModel):
    """Página de resultados de una búsqueda sobre la ventana reciente.

    `total` cuenta todas las coincidencias de la ventana antes de paginar;
    `results` contiene solo la porción de la página, más reciente primero.
    """

    query: str
    results: list[Comic] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    pagination: Pagination
