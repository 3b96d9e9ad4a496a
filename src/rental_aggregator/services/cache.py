"""Time-to-live cache for the aggregated snapshot with single-flight refresh."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Set

from ..models.listing import Snapshot
from .aggregator import AggregationOrchestrator
from .changes import ChangeDispatcher

logger = logging.getLogger(__name__)

CACHE_TTL = timedelta(minutes=10)


class ResultCache:
    """
    Owns the current snapshot between refresh cycles.

    All access happens on one event loop. Reads inside the TTL window return
    immediately. Once the window has passed, the first caller starts a
    refresh and every caller arriving while it runs awaits that same task, so
    at most one aggregation is in flight at a time.
    Change dispatch for a refresh runs as its own task, so a slow notifier
    never holds up callers.
    """

    def __init__(
        self,
        orchestrator: AggregationOrchestrator,
        dispatcher: Optional[ChangeDispatcher] = None,
        ttl: timedelta = CACHE_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.orchestrator = orchestrator
        self.dispatcher = dispatcher
        self.ttl = ttl
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._current: Optional[Snapshot] = None
        self._stored_at: Optional[datetime] = None
        self._refresh_task: Optional[asyncio.Task] = None
        self._dispatch_tasks: Set[asyncio.Task] = set()
        self.refresh_count = 0

    @property
    def current(self) -> Optional[Snapshot]:
        """Last stored snapshot, without triggering a refresh."""
        return self._current

    def is_fresh(self) -> bool:
        if self._current is None or self._stored_at is None:
            return False
        return self._clock() - self._stored_at < self.ttl

    def invalidate(self) -> None:
        self._stored_at = None

    async def get(self, force_refresh: bool = False) -> Snapshot:
        """
        Return the cached snapshot, refreshing it when stale or forced.

        Args:
            force_refresh: Skip the TTL check; still joins a refresh already
                in flight instead of starting a second one
        """
        if not force_refresh and self.is_fresh():
            logger.debug("Returning cached snapshot")
            return self._current

        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._refresh())
        else:
            logger.debug("Joining in-flight refresh")

        # Shield so one cancelled caller does not cancel the shared refresh
        return await asyncio.shield(self._refresh_task)

    async def _refresh(self) -> Snapshot:
        try:
            self.refresh_count += 1
            snapshot = await self.orchestrator.aggregate()
            previous = self._current
            self._current = snapshot
            self._stored_at = self._clock()

            if self.dispatcher is not None:
                # Delivery is not part of the refresh that callers await
                task = asyncio.ensure_future(self.dispatcher.dispatch(previous, snapshot))
                self._dispatch_tasks.add(task)
                task.add_done_callback(self._dispatch_done)
            return snapshot
        finally:
            self._refresh_task = None

    def _dispatch_done(self, task: asyncio.Task) -> None:
        self._dispatch_tasks.discard(task)
        if task.cancelled():
            logger.warning("Change dispatch cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Change dispatch failed: {error}")

    @property
    def pending_notifications(self) -> int:
        return len(self._dispatch_tasks)

    async def wait_for_notifications(self) -> None:
        """Wait until every started change dispatch has finished."""
        while self._dispatch_tasks:
            await asyncio.gather(*list(self._dispatch_tasks), return_exceptions=True)
