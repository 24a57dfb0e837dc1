"""Suspending chain runner.

The same users -> posts -> comments chain written as one sequential
coroutine: every stage is awaited to completion and inspected before the
next line runs. Failures and empty selections end the run silently; the
presenter receives nothing and cannot tell a failed run from a slow one.
"""

from __future__ import annotations

import concurrent.futures

from core.domain.errors import TransportError
from core.domain.models import Comment, Post, User
from core.domain.selection import SelectionPolicy
from core.domain.stage import Stage
from core.interfaces.delivery import DeliveryContext
from core.interfaces.presenter import Presenter
from core.interfaces.transport import Transport
from core.log import get_logger
from core.services.delivery import InlineContext
from core.services.endpoints import comments_url, posts_url, users_url
from core.services.worker import BackgroundWorker

logger = get_logger(__name__)


class SuspendingChainRunner:
    """Runs the chain with sequential awaits on a background worker.

    Args:
        transport: Fetch-and-decode capability.
        base_url: API root; endpoint paths are appended.
        policy: Which element of each stage is carried forward (first by default).
        context: Where `present` is invoked. Inline when omitted.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        base_url: str,
        policy: SelectionPolicy = SelectionPolicy.FIRST,
        context: DeliveryContext | None = None,
    ) -> None:
        self._transport = transport
        self._base_url = base_url
        self._policy = policy
        self._context = context or InlineContext()

    @property
    def policy(self) -> SelectionPolicy:
        return self._policy

    async def fetch_comments(self) -> list[Comment] | None:
        """Run the three stages; None on any failure or empty selection."""

        try:
            users = await self._transport.fetch(users_url(self._base_url), User)
        except TransportError as exc:
            logger.debug("chain_stopped", runner="suspending", stage=Stage.USERS.value, error=str(exc))
            return None
        user = self._policy.select(users)
        if user is None:
            logger.debug("chain_stopped", runner="suspending", reason=Stage.USERS.empty_tag)
            return None

        try:
            posts = await self._transport.fetch(posts_url(self._base_url, user_id=user.id), Post)
        except TransportError as exc:
            logger.debug("chain_stopped", runner="suspending", stage=Stage.POSTS.value, error=str(exc))
            return None
        post = self._policy.select(posts)
        if post is None:
            logger.debug("chain_stopped", runner="suspending", reason=Stage.POSTS.empty_tag)
            return None

        try:
            return await self._transport.fetch(comments_url(self._base_url, post_id=post.id), Comment)
        except TransportError as exc:
            logger.debug("chain_stopped", runner="suspending", stage=Stage.COMMENTS.value, error=str(exc))
            return None

    async def run(self, presenter: Presenter) -> None:
        """Fetch and, on full success, present the comments."""

        comments = await self.fetch_comments()
        if comments is None:
            return
        logger.debug("chain_delivered", runner="suspending", count=len(comments))
        self._context.submit(presenter.present, comments)

    def start(self, presenter: Presenter, worker: BackgroundWorker) -> concurrent.futures.Future[None]:
        """Schedule `run` on the background worker.

        Cancelling the returned future abandons the remaining stages.
        """

        return worker.submit(self.run(presenter))
