"""Presenter contract: the single sink for final results."""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from core.domain.models import Comment


@runtime_checkable
class Presenter(Protocol):
    """Receives the final comments of a successful chain run.

    `present` is always invoked on the presenter's delivery context.
    """

    def present(self, comments: Sequence[Comment]) -> None: ...
