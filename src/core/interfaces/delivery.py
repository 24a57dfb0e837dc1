"""Delivery context contract.

The runners never assume which threading primitive moves a result onto the
UI side; they only hand a callback to a context.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class DeliveryContext(Protocol):
    """Executes callbacks on a designated execution context."""

    def submit(self, fn: Callable[..., Any], *args: Any) -> None: ...
