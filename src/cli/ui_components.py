"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- Lets several commands reuse tables/panels.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.errors import ChainError, EmptyCollectionError
from core.domain.models import Comment


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Why here:
    - Avoids circular imports (main <-> doctor).
    - Lets non-interactive modes skip the banner.
    """

    title = Text("fetch-chain", style="bold cyan")
    subtitle = Text("users -> posts -> comments", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_comments_table(comments: Sequence[Comment]) -> Table:
    """One row per comment, keyed by id, showing the contact field."""

    table = Table(title=f"Comments ({len(comments)})")
    table.add_column("ID", style="cyan", no_wrap=True, justify="right")
    table.add_column("Email", style="white")
    for comment in comments:
        table.add_row(str(comment.id), comment.contact_field)
    return table


def build_error_panel(error: ChainError) -> Panel:
    """Panel for a failed reactive run."""

    title = Text("Chain failed", style="bold red")
    body = Text()
    body.append(str(error))
    if isinstance(error, EmptyCollectionError):
        body.append(f"\nStage: {error.stage.value}", style="dim")
    else:
        url = getattr(error, "url", None)
        if url:
            body.append(f"\nURL: {url}", style="dim")
    return Panel(body, title=title, border_style="red")
