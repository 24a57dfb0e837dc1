"""Error hierarchy of the fetch chain.

All chain errors inherit from ChainError for easy catching. Adapters
translate library errors into these at the boundary.
"""

from __future__ import annotations

from core.domain.stage import Stage


class ChainError(Exception):
    """Base error for all chain operations."""


class TransportError(ChainError):
    """Network, status or decode failure; opaque to callers."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.url = url


class EmptyCollectionError(ChainError):
    """A stage returned no element to carry forward."""

    def __init__(self, stage: Stage) -> None:
        super().__init__(f"empty upstream collection ({stage.empty_tag})")
        self.stage = stage

    @property
    def tag(self) -> str:
        return self.stage.empty_tag
