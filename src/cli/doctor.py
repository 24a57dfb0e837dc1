"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.domain.selection import SelectionPolicy
from core.services.endpoints import users_url

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return response.is_success, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc) or type(exc).__name__


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="fetch-chain Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds:g}s")
    table.add_row("Reactive policy", "OK", settings.reactive_policy.value)
    table.add_row("Suspending policy", "OK", settings.suspending_policy.value)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(_check_http(users_url(settings.base_url), settings))
    table.add_row("API connectivity", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if not ok_http:
        _console.print(
            "\n[yellow]Note:[/yellow] Set FETCH_CHAIN_BASE_URL or run `doctor config` to point at a reachable API."
        )


@app.command(name="config")
def configure() -> None:
    """Interactive setup (stores config in the user config .env)."""

    settings = AppSettings()

    base_url = typer.prompt("API base URL", default=settings.base_url, show_default=True).strip()
    reactive = typer.prompt(
        "Reactive selection policy (first/last)",
        default=settings.reactive_policy.value,
        show_default=True,
    )
    suspending = typer.prompt(
        "Suspending selection policy (first/last)",
        default=settings.suspending_policy.value,
        show_default=True,
    )

    if not base_url:
        raise typer.BadParameter("base_url is required")
    try:
        reactive_policy = SelectionPolicy.parse(reactive)
        suspending_policy = SelectionPolicy.parse(suspending)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    env_path = write_user_env_vars(
        {
            "FETCH_CHAIN_BASE_URL": base_url,
            "FETCH_CHAIN_REACTIVE_POLICY": reactive_policy.value,
            "FETCH_CHAIN_SUSPENDING_POLICY": suspending_policy.value,
        }
    )

    _console.print(f"[green]Saved config to:[/green] {env_path}")
