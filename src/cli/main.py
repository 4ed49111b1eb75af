"""CLI (Typer) de xkcd-proxy.

Comandos:
- `serve`: levanta la API HTTP con uvicorn.
- `latest` / `show` / `random` / `search`: usan el mismo `ComicService`
  directamente contra el upstream, sin pasar por HTTP.
- `doctor`: diagnóstico de configuración y conectividad.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import typer
import uvicorn
from pydantic import BaseModel
from rich.console import Console, RenderableType

from adapters.http_client import build_async_client
from adapters.json_exporter import export_json, to_json_text
from cli import doctor
from cli.ui_components import build_comic_panel, build_search_table, print_banner
from core.config import AppSettings
from core.domain.errors import ComicServiceError
from core.domain.models import Comic, SearchResult
from core.logging_config import configure_logging
from core.services.comic_service import ComicService
from core.services.wiring import build_comic_service

T = TypeVar("T", bound=BaseModel)

app = typer.Typer(
    no_args_is_help=True,
    help="Cached xkcd lookups, random picks and recent-window search.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

JsonOption = typer.Option(False, "--json", help="Print the raw JSON payload instead of a panel/table.")
OutputOption = typer.Option(None, "--output", "-o", help="Also write the JSON payload to this file.")


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override XKCD_PROXY_LOG_LEVEL."),
) -> None:
    settings = AppSettings()
    configure_logging(log_level or settings.log_level)


async def _with_service(settings: AppSettings, op: Callable[[ComicService], Awaitable[T]]) -> T:
    async with build_async_client(settings) as client:
        service = build_comic_service(settings, client=client)
        return await op(service)


def _execute(op: Callable[[ComicService], Awaitable[T]]) -> T:
    settings = AppSettings()
    try:
        return asyncio.run(_with_service(settings, op))
    except ComicServiceError as exc:
        _console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1) from exc


def _emit(
    model: T,
    *,
    as_json: bool,
    output: Path | None,
    render: Callable[[T], RenderableType],
) -> None:
    if output is not None:
        path = export_json(model=model, output_path=output)
        _console.print(f"[green]Saved JSON to:[/green] {path}")
    if as_json:
        typer.echo(to_json_text(model))
    else:
        _console.print(render(model))


@app.command()
def latest(as_json: bool = JsonOption, output: Path | None = OutputOption) -> None:
    """Show the newest comic."""

    comic: Comic = _execute(lambda service: service.get_latest())
    _emit(comic, as_json=as_json, output=output, render=build_comic_panel)


@app.command()
def show(
    comic_id: int = typer.Argument(..., min=1, help="Comic number."),
    as_json: bool = JsonOption,
    output: Path | None = OutputOption,
) -> None:
    """Show one comic by number."""

    comic: Comic = _execute(lambda service: service.get_by_id(comic_id))
    _emit(comic, as_json=as_json, output=output, render=build_comic_panel)


@app.command()
def random(as_json: bool = JsonOption, output: Path | None = OutputOption) -> None:
    """Show a random comic."""

    comic: Comic = _execute(lambda service: service.get_random())
    _emit(comic, as_json=as_json, output=output, render=build_comic_panel)


@app.command()
def search(
    query: str = typer.Argument(..., help="Text to look for in titles and transcripts."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(10, "--limit", min=1, max=50),
    as_json: bool = JsonOption,
    output: Path | None = OutputOption,
) -> None:
    """Search the most recent comics (title/transcript, case-insensitive)."""

    query = query.strip()
    if not 1 <= len(query) <= 100:
        raise typer.BadParameter("Query must be between 1 and 100 characters", param_hint="QUERY")

    result: SearchResult = _execute(lambda service: service.search(query, page, limit))
    _emit(result, as_json=as_json, output=output, render=build_search_table)


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default: XKCD_PROXY_HOST)."),
    port: int = typer.Option(None, "--port", min=1, max=65535, help="Port (default: XKCD_PROXY_PORT)."),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes (development)."),
) -> None:
    """Run the HTTP API."""

    settings = AppSettings()
    print_banner(_console)
    uvicorn.run(
        "api.app:create_default_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


def run() -> None:
    app()
