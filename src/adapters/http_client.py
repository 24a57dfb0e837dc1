"""httpx wrapper and HTTP transport.

Why a wrapper:
- Standardizes timeouts, headers and redirects for every request.
- Eases testing: the underlying httpx transport can be swapped for a
  `httpx.MockTransport`.
- Collapses every failure (network, status, JSON, schema) into a single
  `TransportError` so runners deal with one error channel.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from core.config import AppSettings
from core.domain.errors import TransportError
from core.interfaces.transport import ModelT
from core.log import get_logger

logger = get_logger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with safe defaults.

    Why a builder:
    - Centralizes timeouts/headers so every endpoint behaves the same.
    - `transport` lets tests route requests to an in-process handler.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpTransport:
    """`Transport` implementation backed by httpx.

    A client is opened per request, so one instance is safe to share across
    event loops (UI loop and background worker).
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._adapters: dict[type[Any], TypeAdapter[Any]] = {}

    def _adapter(self, model: type[ModelT]) -> TypeAdapter[list[ModelT]]:
        adapter = self._adapters.get(model)
        if adapter is None:
            adapter = TypeAdapter(list[model])  # type: ignore[valid-type]
            self._adapters[model] = adapter
        return adapter

    async def fetch(self, url: str, model: type[ModelT]) -> list[ModelT]:
        try:
            async with build_async_client(self._settings, transport=self._transport) as client:
                resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.info("transport_request_failed", url=url, status=exc.response.status_code)
            raise TransportError(f"HTTP {exc.response.status_code} for {url}", url=url) from exc
        except httpx.HTTPError as exc:
            logger.info("transport_request_failed", url=url, error=str(exc))
            raise TransportError(str(exc) or type(exc).__name__, url=url) from exc

        try:
            items = self._adapter(model).validate_json(resp.content)
        except ValidationError as exc:
            logger.info("transport_decode_failed", url=url, model=model.__name__, errors=exc.error_count())
            raise TransportError(f"Could not decode {model.__name__} list from {url}: {exc}", url=url) from exc

        logger.debug("transport_request_done", url=url, model=model.__name__, count=len(items))
        return items
