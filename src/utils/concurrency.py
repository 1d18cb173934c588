"""Bounded fan-out helper for independent per-node lookups.

Metadata enrichment and branch lookups issue one small request per node.
Those requests have no ordering dependency on each other, so they run
concurrently, but they hit third-party APIs that throttle bursts.
:func:`throttled_gather` wraps ``asyncio.gather`` with a semaphore and
always collects exceptions in place so one failed node never cancels the
others.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

import structlog

from src.utils.logging import get_logger

_T = TypeVar("_T")

_DEFAULT_CONCURRENCY = 5

_logger: structlog.BoundLogger = get_logger(__name__)


async def throttled_gather(
    coros: list[Awaitable[_T]],
    limit: int = _DEFAULT_CONCURRENCY,
    semaphore: asyncio.Semaphore | None = None,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most *limit* at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute.
    limit:
        Maximum number in flight when no *semaphore* is given.
    semaphore:
        Optional shared semaphore, for callers that want one budget
        across several gathers.

    Returns
    -------
    list[_T | BaseException]
        Results in input order; a failed awaitable contributes its
        exception instead of a value.
    """
    if not coros:
        return []
    if semaphore is None:
        semaphore = asyncio.Semaphore(max(1, limit))

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    results = await asyncio.gather(
        *(_wrapped(c) for c in coros),
        return_exceptions=True,
    )

    failures = sum(1 for r in results if isinstance(r, BaseException))
    if failures:
        _logger.debug("throttled_gather_failures", total=len(results), failed=failures)
    return list(results)
