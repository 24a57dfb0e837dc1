"""fetch-chain CLI (Typer).

The `comments` command plays the role of the list view: it creates the
presenter, triggers one chain run and renders whatever the presenter holds
once the run ends.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import Enum

import typer
from rich.console import Console

from adapters.http_client import HttpTransport
from cli.doctor import app as doctor_app
from cli.ui_components import build_comments_table, build_error_panel, print_banner
from core.config import AppSettings
from core.domain.errors import ChainError
from core.domain.models import Comment
from core.domain.selection import SelectionPolicy
from core.interfaces.transport import Transport
from core.log import configure_logging, get_logger
from core.services.delivery import LoopContext
from core.services.presenter import CommentsPresenter
from core.services.worker import BackgroundWorker

app = typer.Typer(no_args_is_help=True, help="Dependent fetch chain: users -> posts -> comments.")
app.add_typer(doctor_app, name="doctor")

_console = Console()

logger = get_logger(__name__)


class Strategy(str, Enum):
    SUSPENDING = "suspending"
    REACTIVE = "reactive"


@dataclass
class LoadOutcome:
    """What the view observed after one run."""

    comments: list[Comment] = field(default_factory=list)
    delivered: bool = False
    error: ChainError | None = None
    timed_out: bool = False


async def load_comments(
    *,
    settings: AppSettings,
    strategy: Strategy,
    timeout: float,
    transport: Transport | None = None,
) -> LoadOutcome:
    """Run one chain with `strategy` and wait for its outcome.

    A suspending run that stops silently ends with `delivered=False` and no
    error; only the worker future completing tells us it is over.
    """

    outcome = LoadOutcome()
    done = asyncio.Event()

    def on_change(comments: list[Comment]) -> None:
        outcome.delivered = True
        done.set()

    def on_error(error: ChainError) -> None:
        outcome.error = error
        done.set()

    # Only the suspending strategy runs on the worker thread.
    worker = BackgroundWorker()
    presenter = CommentsPresenter(
        transport=transport or HttpTransport(settings),
        ui_context=LoopContext.current(),
        worker=worker,
        settings=settings,
        on_change=on_change,
        on_error=on_error,
    )

    if strategy is Strategy.REACTIVE:
        subscription = presenter.fetch_comments_with_reactive()
        try:
            await asyncio.wait_for(done.wait(), timeout)
        except TimeoutError:
            subscription.cancel()
            outcome.timed_out = True
    else:
        # start/stop block on the worker thread; keep that off the UI loop.
        await asyncio.to_thread(worker.start)
        try:
            future = presenter.fetch_comments_with_suspending()
            try:
                await asyncio.wait_for(asyncio.wrap_future(future), timeout)
            except TimeoutError:
                outcome.timed_out = True
        finally:
            await asyncio.to_thread(worker.stop)

    outcome.comments = presenter.comments

    return outcome


@app.command()
def comments(
    strategy: Strategy = typer.Option(
        Strategy.SUSPENDING,
        "--strategy",
        "-s",
        case_sensitive=False,
        help="Chain strategy to run.",
    ),
    timeout: float = typer.Option(30.0, "--timeout", min=0.1, help="Seconds to wait for the run."),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL."),
    policy: str | None = typer.Option(
        None,
        "--policy",
        help="Override the selection policy of the chosen strategy (first/last).",
    ),
    no_banner: bool = typer.Option(False, "--no-banner", help="Do not print the banner."),
) -> None:
    """Fetch users, then posts, then comments, and list the comments."""

    settings = AppSettings()
    update: dict[str, object] = {}
    if base_url:
        update["base_url"] = base_url
    if policy:
        try:
            parsed = SelectionPolicy.parse(policy)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--policy") from exc
        key = "reactive_policy" if strategy is Strategy.REACTIVE else "suspending_policy"
        update[key] = parsed
    if update:
        settings = settings.model_copy(update=update)

    configure_logging(settings.log_level, json=settings.log_json)

    if not no_banner:
        print_banner(_console)

    outcome = asyncio.run(load_comments(settings=settings, strategy=strategy, timeout=timeout))

    if outcome.error is not None:
        _console.print(build_error_panel(outcome.error))
        raise typer.Exit(code=1)
    if outcome.timed_out:
        _console.print(f"[yellow]Timed out after {timeout:g}s waiting for the chain.[/yellow]")
        raise typer.Exit(code=1)
    if not outcome.delivered:
        _console.print("[yellow]No comments delivered.[/yellow]")
        raise typer.Exit(code=1)

    _console.print(build_comments_table(outcome.comments))


def run() -> None:
    app()
