"""Bounded-concurrency detail fetcher for ID-enumeration providers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Sequence

from eventscout.search.schemas import DetailError, DetailFetchResult

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SIZE = 5
DEFAULT_WINDOW_DELAY = 0.2


async def fetch_details(
    ids: Sequence[str],
    fetch_one: Callable[[str], Awaitable[Any]],
    window_size: int = DEFAULT_WINDOW_SIZE,
    delay: float = DEFAULT_WINDOW_DELAY,
) -> DetailFetchResult:
    """
    Fetch details for each id in fixed-size concurrent windows.

    All calls in a window run together and the whole window settles before
    the next one starts. A call that raises or returns a falsy value is
    recorded as a DetailError; its siblings are unaffected.

    Args:
        ids: Identifiers to fetch, in order
        fetch_one: Coroutine function returning the detail record for one id
        window_size: Maximum concurrent calls
        delay: Seconds to wait between windows

    Returns:
        DetailFetchResult with successes in input order and a separate error list
    """
    window_size = max(1, window_size)
    result = DetailFetchResult(total_ids=len(ids))
    total_windows = (len(ids) + window_size - 1) // window_size

    for start in range(0, len(ids), window_size):
        window = list(ids[start:start + window_size])
        logger.debug(f"Detail window {start // window_size + 1}/{total_windows}: {len(window)} items")

        outcomes = await asyncio.gather(*(fetch_one(item_id) for item_id in window), return_exceptions=True)

        for item_id, outcome in zip(window, outcomes):
            if isinstance(outcome, BaseException):
                result.errors.append(DetailError(item_id=item_id, error=str(outcome) or type(outcome).__name__))
            elif not outcome:
                result.errors.append(DetailError(item_id=item_id, error="empty detail response"))
            else:
                result.items.append(outcome)

        if delay > 0 and start + window_size < len(ids):
            await asyncio.sleep(delay)

    if result.errors:
        logger.warning(f"Detail fetch finished: {result.successful} succeeded, {result.failed} failed")
    return result
