"""Reactive chain runner.

Composes the three dependent fetches as a callback pipeline: each stage runs
as an asyncio task whose completion callback validates the result, applies
the selection policy and schedules the next stage. The subscriber receives
exactly one terminal notification (value or error) on the delivery context.

State machine::

    IDLE -> FETCHING_USERS -> FETCHING_POSTS -> FETCHING_COMMENTS -> DELIVERED
                 |                 |                  |
                 +-----------------+------------------+--> FAILED
    (any non-notified state) --cancel()--> CANCELLED

Releasing the subscription (``Subscription.cancel``) stops the pipeline: the
in-flight task is cancelled and no notification is delivered, even one that
was already queued on the delivery context. Subscriptions must be cancelled
from the loop the run was started on.
"""

from __future__ import annotations

import asyncio
import functools
from enum import Enum
from typing import Any, Callable, Sequence, TypeVar

from core.domain.errors import ChainError, EmptyCollectionError, TransportError
from core.domain.models import Comment, Post, User
from core.domain.selection import SelectionPolicy
from core.domain.stage import Stage
from core.interfaces.delivery import DeliveryContext
from core.interfaces.transport import Transport
from core.log import get_logger
from core.services.delivery import LoopContext
from core.services.endpoints import comments_url, posts_url, users_url

T = TypeVar("T")

ValueCallback = Callable[[list[Comment]], None]
ErrorCallback = Callable[[ChainError], None]

logger = get_logger(__name__)


class ChainState(str, Enum):
    IDLE = "idle"
    FETCHING_USERS = "fetching_users"
    FETCHING_POSTS = "fetching_posts"
    FETCHING_COMMENTS = "fetching_comments"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (ChainState.DELIVERED, ChainState.FAILED, ChainState.CANCELLED)


_FETCHING = {
    Stage.USERS: ChainState.FETCHING_USERS,
    Stage.POSTS: ChainState.FETCHING_POSTS,
    Stage.COMMENTS: ChainState.FETCHING_COMMENTS,
}


def _log_error(error: ChainError) -> None:
    logger.warning("chain_failed", runner="reactive", error=str(error), kind=type(error).__name__)


class _ChainRun:
    """State of one chain run. Never shared between runs."""

    def __init__(
        self,
        *,
        transport: Transport,
        base_url: str,
        policy: SelectionPolicy,
        context: DeliveryContext,
        on_value: ValueCallback,
        on_error: ErrorCallback,
    ) -> None:
        self.state = ChainState.IDLE
        self._transport = transport
        self._base_url = base_url
        self._policy = policy
        self._context = context
        self._on_value = on_value
        self._on_error = on_error
        self._task: asyncio.Future[Any] | None = None
        self._notified = False

    def start(self) -> None:
        self._fetch(Stage.USERS, users_url(self._base_url), User, self._on_users)

    def cancel(self) -> None:
        if self._notified or self.state is ChainState.CANCELLED:
            return
        previous = self.state
        self.state = ChainState.CANCELLED
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None
        logger.debug("chain_cancelled", runner="reactive", previous_state=previous.value)

    def _fetch(
        self,
        stage: Stage,
        url: str,
        model: type[Any],
        next_step: Callable[[list[Any]], None],
    ) -> None:
        if self.state is ChainState.CANCELLED:
            return
        self.state = _FETCHING[stage]
        logger.debug("chain_stage_started", runner="reactive", stage=stage.value, url=url)
        task = asyncio.ensure_future(self._transport.fetch(url, model))
        self._task = task
        task.add_done_callback(functools.partial(self._on_done, stage, next_step))

    def _on_done(
        self,
        stage: Stage,
        next_step: Callable[[list[Any]], None],
        task: asyncio.Future[Any],
    ) -> None:
        if self.state is ChainState.CANCELLED:
            return
        if task.cancelled():
            # Cancelled from outside the subscription (e.g. loop shutdown).
            self.state = ChainState.CANCELLED
            return

        exc = task.exception()
        if exc is not None:
            if not isinstance(exc, ChainError):
                exc = TransportError(str(exc) or type(exc).__name__)
            logger.debug("chain_stage_failed", runner="reactive", stage=stage.value, error=str(exc))
            self._finish(ChainState.FAILED, self._on_error, exc)
            return

        next_step(task.result())

    def _select(self, stage: Stage, items: Sequence[T]) -> T | None:
        chosen = self._policy.select(items)
        if chosen is None:
            self._finish(ChainState.FAILED, self._on_error, EmptyCollectionError(stage))
        return chosen

    def _on_users(self, users: list[User]) -> None:
        user = self._select(Stage.USERS, users)
        if user is None:
            return
        self._fetch(Stage.POSTS, posts_url(self._base_url, user_id=user.id), Post, self._on_posts)

    def _on_posts(self, posts: list[Post]) -> None:
        post = self._select(Stage.POSTS, posts)
        if post is None:
            return
        self._fetch(Stage.COMMENTS, comments_url(self._base_url, post_id=post.id), Comment, self._on_comments)

    def _on_comments(self, comments: list[Comment]) -> None:
        self._finish(ChainState.DELIVERED, self._on_value, comments)

    def _finish(self, state: ChainState, callback: Callable[[Any], None], payload: Any) -> None:
        self.state = state
        self._task = None
        self._context.submit(self._notify, callback, payload)

    def _notify(self, callback: Callable[[Any], None], payload: Any) -> None:
        if self.state is ChainState.CANCELLED:
            return
        self._notified = True
        callback(payload)


class Subscription:
    """Handle to one reactive chain run; releasing it cancels the run."""

    def __init__(self, run: _ChainRun) -> None:
        self._run = run

    @property
    def state(self) -> ChainState:
        return self._run.state

    @property
    def is_terminal(self) -> bool:
        return self._run.state.is_terminal

    @property
    def cancelled(self) -> bool:
        return self._run.state is ChainState.CANCELLED

    def cancel(self) -> None:
        """Release the subscription. No-op once the notification was delivered."""
        self._run.cancel()


class ReactiveChainRunner:
    """Runs users -> posts -> comments as a callback pipeline.

    Args:
        transport: Fetch-and-decode capability.
        base_url: API root; endpoint paths are appended.
        policy: Which element of each stage is carried forward (last by default).
        context: Where terminal notifications run. Defaults to the loop
            calling ``run``.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str,
        policy: SelectionPolicy = SelectionPolicy.LAST,
        context: DeliveryContext | None = None,
    ) -> None:
        self._transport = transport
        self._base_url = base_url
        self._policy = policy
        self._context = context

    @property
    def policy(self) -> SelectionPolicy:
        return self._policy

    def run(
        self,
        on_value: ValueCallback,
        on_error: ErrorCallback | None = None,
        *,
        context: DeliveryContext | None = None,
    ) -> Subscription:
        """Start a new independent run. Requires a running event loop.

        `on_error` defaults to logging the error; no recovery is attempted.
        """

        asyncio.get_running_loop()
        run = _ChainRun(
            transport=self._transport,
            base_url=self._base_url,
            policy=self._policy,
            context=context or self._context or LoopContext.current(),
            on_value=on_value,
            on_error=on_error or _log_error,
        )
        run.start()
        return Subscription(run)
