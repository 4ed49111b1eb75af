"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.xkcd_client import XkcdClient
from core.config import AppSettings, get_user_env_file
from core.domain.errors import ComicServiceError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_upstream(settings: AppSettings) -> tuple[bool, str]:
    try:
        comic = await XkcdClient(settings).fetch_latest()
    except ComicServiceError as exc:
        return False, str(exc)
    return True, f"latest comic #{comic.id}"


@app.command()
def run() -> None:
    """Show the effective configuration and check upstream connectivity."""

    settings = AppSettings()

    table = Table(title="xkcd-proxy Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Upstream", "OK", settings.upstream_base_url)
    table.add_row("HTTP timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Cache TTL", "OK", f"{settings.cache_ttl_seconds:g}s")
    if settings.cache_max_entries is None:
        table.add_row("Cache bound", "OPTIONAL", "unbounded (lazy expiry only)")
    else:
        table.add_row("Cache bound", "OK", f"LRU, {settings.cache_max_entries} entries")
    table.add_row(
        "Search window",
        "OK",
        f"{settings.search_window_size} comics, concurrency {settings.search_max_concurrency}",
    )
    rate = settings.rate_limit if settings.rate_limit_enabled else "disabled"
    table.add_row("Rate limit", "OK", rate)
    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_upstream(settings))
    table.add_row("Upstream connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] the server still starts without upstream access; "
            "lookups will answer 502/504 until it is reachable."
        )
        raise typer.Exit(code=1)


@app.command(name="env")
def show_env() -> None:
    """List the environment variables understood by the app and their current values."""

    settings = AppSettings()
    prefix = settings.model_config.get("env_prefix", "")

    table = Table(title="xkcd-proxy settings")
    table.add_column("Variable", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Description", style="dim")
    for name, field in AppSettings.model_fields.items():
        table.add_row(f"{prefix}{name}".upper(), str(getattr(settings, name)), field.description or "")

    _console.print(table)
    _console.print(f"\nUser config file: {get_user_env_file()}")
