"""Componentes de UI para CLI (Rich).

Mantiene los detalles visuales (paneles, tablas) fuera de los comandos.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Comic, SearchResult

_TRANSCRIPT_PREVIEW_CHARS = 400


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida (solo en modos interactivos)."""

    title = Text("xkcd-proxy", style="bold cyan")
    subtitle = Text("Cache • Random • Búsqueda reciente", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _comic_date(comic: Comic) -> str:
    parts = [comic.year, comic.month.zfill(2), comic.day.zfill(2)]
    if not all(parts):
        return "-"
    return "-".join(parts)


def build_comic_panel(comic: Comic) -> Panel:
    title = Text(f"#{comic.id} {comic.title}", style="bold yellow")
    body = Text()
    body.append(f"{comic.img}\n", style="magenta")
    body.append(f"Fecha: {_comic_date(comic)}\n", style="dim")
    if comic.alt:
        body.append("\n" + comic.alt.strip() + "\n", style="italic")
    if comic.transcript:
        transcript = comic.transcript.strip()
        if len(transcript) > _TRANSCRIPT_PREVIEW_CHARS:
            transcript = transcript[: _TRANSCRIPT_PREVIEW_CHARS - 1].rstrip() + "…"
        body.append("\nTranscript:\n", style="bold")
        body.append(transcript)
    return Panel(body, title=title, border_style="yellow")


def build_search_table(result: SearchResult) -> Table:
    p = result.pagination
    table = Table(
        title=f"Search '{result.query}': {result.total} match(es), page {p.page}",
        caption=f"offset {p.offset}, limit {p.limit}",
    )
    table.add_column("#", style="cyan", no_wrap=True, justify="right")
    table.add_column("Title", style="white")
    table.add_column("Date", style="dim", no_wrap=True)
    table.add_column("Image", style="magenta")
    for comic in result.results:
        table.add_row(str(comic.id), comic.title, _comic_date(comic), comic.img)
    return table
