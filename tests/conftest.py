"""Shared test fixtures for fetch-chain."""

from __future__ import annotations

import asyncio
import os
import threading
import time
from pathlib import Path
from typing import Any, Callable

import pytest

from core.config import AppSettings, get_user_env_file
from core.domain.errors import TransportError
from core.services.endpoints import comments_url, posts_url, users_url

BASE_URL = "https://api.test"

USERS = [
    {"id": 1, "name": "A", "username": "alpha", "address": {"city": "X"}},
    {"id": 2, "name": "B", "username": "beta"},
]
POSTS_BY_USER = {
    1: [
        {"id": 1, "userId": 1, "title": "first of A", "body": "..."},
        {"id": 2, "userId": 1, "title": "second of A"},
    ],
    2: [
        {"id": 10, "userId": 2, "title": "x"},
        {"id": 11, "userId": 2, "title": "y"},
    ],
}
COMMENTS_BY_POST = {
    1: [
        {"id": 200, "postId": 1, "email": "f1", "name": "n", "body": "b"},
        {"id": 201, "postId": 1, "email": "f2"},
    ],
    11: [{"id": 100, "postId": 11, "email": "e1"}],
}

USERS_URL = users_url(BASE_URL)


def scenario_responses() -> dict[str, Any]:
    """Responses keyed by full URL for the users/posts/comments scenario."""
    responses: dict[str, Any] = {USERS_URL: USERS}
    for user_id, posts in POSTS_BY_USER.items():
        responses[posts_url(BASE_URL, user_id=user_id)] = posts
    for post_id, comments in COMMENTS_BY_POST.items():
        responses[comments_url(BASE_URL, post_id=post_id)] = comments
    return responses


class FakeTransport:
    """In-memory `Transport`.

    A response may be a list of JSON-like dicts or an exception to raise.
    Unknown URLs fail like a 404. `delays` sleeps before answering a URL.
    """

    def __init__(
        self,
        responses: dict[str, Any] | None = None,
        *,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.responses = scenario_responses() if responses is None else responses
        self.delays = delays or {}
        self.calls: list[str] = []

    async def fetch(self, url: str, model: type[Any]) -> list[Any]:
        self.calls.append(url)
        await asyncio.sleep(self.delays.get(url, 0))
        if url not in self.responses:
            raise TransportError(f"HTTP 404 for {url}", url=url)
        response = self.responses[url]
        if isinstance(response, BaseException):
            raise response
        return [model.model_validate(item) for item in response]


class RecordingPresenter:
    """Presenter double that records every delivery."""

    def __init__(self) -> None:
        self.presented: list[list[Any]] = []
        self.threads: list[int] = []

    def present(self, comments: Any) -> None:
        self.threads.append(threading.get_ident())
        self.presented.append(list(comments))


class QueueContext:
    """Delivery context that holds callbacks until `flush`."""

    def __init__(self) -> None:
        self.pending: list[tuple[Callable[..., Any], tuple[Any, ...]]] = []

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        self.pending.append((fn, args))

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for fn, args in pending:
            fn(*args)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until `predicate` holds or fail after `timeout`."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep AppSettings away from the developer's .env files and FETCH_CHAIN_* vars.

    Returns the user config directory used for the test.
    """
    monkeypatch.setattr("sys.platform", "linux")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.upper().startswith("FETCH_CHAIN_"):
            monkeypatch.delenv(name)
    # env_file is resolved at import time; point it at the temporary locations.
    monkeypatch.setitem(AppSettings.model_config, "env_file", (".env", str(get_user_env_file())))
    return get_user_env_file().parent


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, base_url=BASE_URL)
