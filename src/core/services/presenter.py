"""Comments presenter.

Holds the latest successful result and exposes one entry point per chain
strategy. `present` is the only writer of `comments` and always runs on the
presenter's UI context; overlapping runs are last-write-wins.
"""

from __future__ import annotations

import concurrent.futures
from typing import Callable, Sequence

from core.config import AppSettings
from core.domain.models import Comment
from core.interfaces.delivery import DeliveryContext
from core.interfaces.transport import Transport
from core.log import get_logger
from core.services.reactive_chain import ErrorCallback, ReactiveChainRunner, Subscription
from core.services.suspending_chain import SuspendingChainRunner
from core.services.worker import BackgroundWorker

logger = get_logger(__name__)


class CommentsPresenter:
    """View model for the comments list."""

    def __init__(
        self,
        *,
        transport: Transport,
        ui_context: DeliveryContext,
        worker: BackgroundWorker,
        settings: AppSettings | None = None,
        on_change: Callable[[list[Comment]], None] | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        settings = settings or AppSettings()
        self.comments: list[Comment] = []
        self._worker = worker
        self._on_change = on_change
        self._on_error = on_error
        self._reactive = ReactiveChainRunner(
            transport,
            base_url=settings.base_url,
            policy=settings.reactive_policy,
            context=ui_context,
        )
        self._suspending = SuspendingChainRunner(
            transport,
            base_url=settings.base_url,
            policy=settings.suspending_policy,
            context=ui_context,
        )

    def present(self, comments: Sequence[Comment]) -> None:
        self.comments = list(comments)
        logger.debug("comments_presented", count=len(self.comments))
        if self._on_change is not None:
            self._on_change(self.comments)

    def fetch_comments_with_reactive(self) -> Subscription:
        """Start a reactive run. Must be called on the UI loop."""
        return self._reactive.run(self.present, self._on_error)

    def fetch_comments_with_suspending(self) -> concurrent.futures.Future[None]:
        """Start a suspending run on the background worker."""
        return self._suspending.start(self, self._worker)
