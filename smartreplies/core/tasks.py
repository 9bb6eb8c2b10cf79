"""Shared background task utilities."""

import asyncio
from collections.abc import Coroutine
from typing import Any

from smartreplies.core.logging import get_logger

logger = get_logger(__name__)


def create_background_task(
    coro: Coroutine[Any, Any, Any],
    *,
    name: str = "",
    registry: set[asyncio.Task[Any]] | None = None,
) -> asyncio.Task[Any]:
    """Create an asyncio task with exception logging.

    When a registry is given the task is held there until it finishes, so
    the owner can cancel whatever is still pending on teardown.
    """
    task: asyncio.Task[Any] = asyncio.create_task(coro, name=name or None)
    if registry is not None:
        registry.add(task)

    def _done(t: asyncio.Task[Any]) -> None:
        if registry is not None:
            registry.discard(t)
        if t.cancelled():
            return
        if exc := t.exception():
            logger.error("Background task failed", task_name=name, error=str(exc))

    task.add_done_callback(_done)
    return task


async def cancel_tasks(registry: set[asyncio.Task[Any]]) -> None:
    """Cancel every task in the registry and wait for them to settle."""
    tasks = list(registry)
    for task in tasks:
        task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
    registry.clear()
