"""Transport contract.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- Lets the HTTP adapter and in-memory fakes be swapped without coupling the
  runners to httpx.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

from pydantic import BaseModel

ModelT = TypeVar("ModelT", bound=BaseModel)


@runtime_checkable
class Transport(Protocol):
    """Fetch-and-decode capability.

    Design rules:
    - `fetch` is async because it performs I/O.
    - Every failure (network, status, decode) surfaces as `TransportError`.
    """

    async def fetch(self, url: str, model: type[ModelT]) -> list[ModelT]:
        """GET `url` and decode the body as a JSON array of `model`."""

        ...
