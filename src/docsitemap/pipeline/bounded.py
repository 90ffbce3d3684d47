"""Order-preserving async map with a hard cap on in-flight work.

Items are admitted one at a time, each only after a concurrency slot is free,
and results are yielded strictly in input order. Results that finish early wait
in their task until every earlier item has been yielded.

Failure policy is fail-fast: when the consumer reaches a failed item its
exception is re-raised unchanged, admission stops and every other in-flight
item is cancelled. Closing the iterator early behaves the same way.
"""

from __future__ import annotations

import asyncio
from contextlib import aclosing
import logging
from typing import AsyncIterator, Awaitable, Callable, Iterable, Sequence, TypeVar


T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def iter_bounded(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
) -> AsyncIterator[R]:
    """Stream ``worker(item)`` results in input order, ``concurrency`` at a time."""

    if concurrency < 1:
        raise ValueError("concurrency must be >= 1")
    return _ordered_results(list(items), worker, concurrency)


async def run_bounded(
    items: Iterable[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    concurrency: int,
) -> list[R]:
    """Collect every result of :func:`iter_bounded`; any failure discards them all."""

    results: list[R] = []
    async with aclosing(iter_bounded(items, worker, concurrency=concurrency)) as stream:
        async for result in stream:
            results.append(result)
    return results


async def _ordered_results(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    concurrency: int,
) -> AsyncIterator[R]:
    slots = asyncio.Semaphore(concurrency)
    started: asyncio.Queue[asyncio.Task[R]] = asyncio.Queue()
    tasks: list[asyncio.Task[R]] = []

    async def _run(item: T) -> R:
        try:
            return await worker(item)
        finally:
            slots.release()

    async def _admit() -> None:
        for item in items:
            await slots.acquire()
            task = asyncio.create_task(_run(item))
            tasks.append(task)
            started.put_nowait(task)

    admitter = asyncio.create_task(_admit())
    emitted = 0
    try:
        for _ in range(len(items)):
            task = await started.get()
            yield await task
            emitted += 1
    finally:
        admitter.cancel()
        pending = [task for task in tasks if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(admitter, *tasks, return_exceptions=True)
        if emitted < len(items):
            logger.debug("Bounded run stopped after %s of %s items, cancelled %s", emitted, len(items), len(pending))
