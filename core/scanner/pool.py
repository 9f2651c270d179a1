"""Bounded-concurrency task launcher.

Usage:
    from core.scanner.pool import run_bounded

    results = await run_bounded([lambda s=s: evaluate(s) for s in symbols], limit=10)
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[Optional[T]]]


async def run_bounded(factories: Sequence[TaskFactory[T]], limit: int = 10) -> list[T]:
    """Run task factories with at most `limit` in flight.

    A factory is only called once a slot is free, so no more than `limit`
    tasks are ever unresolved at the same time. A task that raises is logged
    and counted as "no result"; it never cancels or blocks its siblings.

    Args:
        factories: Zero-argument callables returning awaitables, in launch order
        limit: Maximum number of concurrently running tasks (default: 10)

    Returns:
        All non-None results, in completion order

    Raises:
        ValueError: If limit < 1
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)
    results: list[T] = []
    completed = 0
    total = len(factories)

    async def _run(index: int, factory: TaskFactory[T]) -> None:
        nonlocal completed
        try:
            result = await factory()
            if result is not None:
                results.append(result)
        except Exception as exc:
            logger.warning(f"Task {index} failed: {exc.__class__.__name__}: {exc}")
        finally:
            completed += 1
            semaphore.release()
            logger.debug(f"Scan progress {completed}/{total}")

    tasks: list[asyncio.Task[None]] = []
    for index, factory in enumerate(factories):
        await semaphore.acquire()
        tasks.append(asyncio.create_task(_run(index, factory)))

    await asyncio.gather(*tasks)
    return results
