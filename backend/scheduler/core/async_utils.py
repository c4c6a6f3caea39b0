"""
Helpers for fanning out store lookups.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, List, TypeVar

T = TypeVar("T")


async def gather_limited(
    coros: Iterable[Awaitable[T]],
    max_concurrent: int = 5,
) -> List[T]:
    """
    Runs awaitables concurrently with a bound on parallelism.

    Results keep the order of ``coros``. The first exception propagates.

    Args:
        coros: Awaitables to run
        max_concurrent: Maximum number of awaitables in flight at once
    """
    semaphore = asyncio.Semaphore(max_concurrent)

    async def run_with_semaphore(coro: Awaitable[T]) -> T:
        async with semaphore:
            return await coro

    return list(await asyncio.gather(*(run_with_semaphore(c) for c in coros)))
