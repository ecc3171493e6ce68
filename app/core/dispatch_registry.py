"""In-process registry of running campaign dispatch tasks.

Holds one asyncio.Task per campaign until the task finishes. A second
start for a running campaign is refused. Shutdown cancels what is left.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

from app.domain.exceptions import DispatchAlreadyRunningException

logger = logging.getLogger(__name__)


class CampaignDispatchRegistry:
    """Implements IDispatchLauncher. Lives on app.state for the process lifetime."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def start(
        self, campaign_id: str, coro: Coroutine[Any, Any, Any]
    ) -> asyncio.Task[Any]:
        """Schedule coro as the dispatch task for campaign_id.

        Raises:
            DispatchAlreadyRunningException: A task for this campaign is still running.
        """
        if self.is_running(campaign_id):
            coro.close()
            raise DispatchAlreadyRunningException(campaign_id)
        task = asyncio.create_task(coro, name=f"campaign-dispatch:{campaign_id}")
        self._tasks[campaign_id] = task
        task.add_done_callback(lambda t: self._on_done(campaign_id, t))
        return task

    def _on_done(self, campaign_id: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(campaign_id) is task:
            del self._tasks[campaign_id]
        if task.cancelled():
            logger.warning("Campaign dispatch %s was cancelled", campaign_id)
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Campaign dispatch %s crashed", campaign_id, exc_info=exc
            )

    def get(self, campaign_id: str) -> asyncio.Task[Any] | None:
        return self._tasks.get(campaign_id)

    def is_running(self, campaign_id: str) -> bool:
        task = self._tasks.get(campaign_id)
        return task is not None and not task.done()

    def running(self) -> list[str]:
        """Campaign ids with a task that has not finished."""
        return [cid for cid, task in self._tasks.items() if not task.done()]

    async def shutdown(self, timeout: float = 5.0) -> None:
        """Cancel running dispatches and wait up to timeout for them to settle."""
        tasks = [t for t in self._tasks.values() if not t.done()]
        if not tasks:
            return
        logger.warning("Cancelling %d running campaign dispatch(es)", len(tasks))
        for task in tasks:
            task.cancel()
        _, pending = await asyncio.wait(tasks, timeout=timeout)
        if pending:
            logger.error("%d campaign dispatch(es) did not stop in time", len(pending))
