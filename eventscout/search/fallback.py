"""Fallback controller: runs a provider's strategies under its fallback policy."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List

from eventscout.search.pagination import fetch_up_to
from eventscout.search.schemas import FallbackOutcome, ProviderSearchResult, SearchLocation, SearchStrategy

if TYPE_CHECKING:
    from eventscout.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)

DEFAULT_ACCUMULATE_LIMIT = 3


class FallbackPolicy(str, Enum):
    """How a provider consumes the strategy list."""

    FIRST_SUCCESS = "first_success"
    ACCUMULATE_UNTIL_FULL = "accumulate_until_full"


def _keyword_key(keyword: str) -> str:
    return " ".join(keyword.lower().split())


def unique_strategies(strategies: Iterable[SearchStrategy]) -> List[SearchStrategy]:
    """
    Order by priority (stable) and drop repeated keywords.

    When two strategies share keyword text, the one with the lower priority
    number is kept and the later one is skipped before any request is made.
    """
    seen = set()
    unique = []
    for strategy in sorted(strategies, key=lambda s: s.priority):
        key = _keyword_key(strategy.keyword)
        if not key or key in seen:
            logger.debug(f"Skipping duplicate strategy '{strategy.keyword}' (priority {strategy.priority})")
            continue
        seen.add(key)
        unique.append(strategy)
    return unique


class FallbackController:
    """Iterates strategies against one adapter and returns normalized events."""

    def __init__(self, accumulate_limit: int = DEFAULT_ACCUMULATE_LIMIT):
        self.accumulate_limit = accumulate_limit

    async def run(
        self,
        adapter: ProviderAdapter,
        strategies: Iterable[SearchStrategy],
        location: SearchLocation | None,
        requested_size: int,
        page: int = 0,
    ) -> FallbackOutcome:
        if not adapter.is_configured:
            logger.debug(f"{adapter.display_name} not configured, returning empty result", extra={"provider": adapter.name})
            return FallbackOutcome(provider=adapter.name, success=True, configured=False)

        ordered = unique_strategies(strategies)
        if adapter.policy == FallbackPolicy.ACCUMULATE_UNTIL_FULL:
            return await self._accumulate_until_full(adapter, ordered, location, requested_size, page)
        return await self._first_success(adapter, ordered, location, requested_size, page)

    async def _first_success(
        self,
        adapter: ProviderAdapter,
        strategies: List[SearchStrategy],
        location: SearchLocation | None,
        requested_size: int,
        page: int,
    ) -> FallbackOutcome:
        requests_made = 0
        tried = 0
        item_errors = []
        last: ProviderSearchResult | None = None

        for strategy in strategies:
            tried += 1
            result = await adapter.search(strategy, location, requested_size, page)
            requests_made += result.requests_made
            item_errors.extend(result.item_errors)
            last = result

            if result.success and result.raw_events:
                logger.info(
                    f"{adapter.display_name} strategy '{strategy.keyword}' returned {len(result.raw_events)} events",
                    extra={"provider": adapter.name, "strategy": strategy.keyword, "events": len(result.raw_events)},
                )
                return FallbackOutcome(
                    provider=adapter.name,
                    success=True,
                    events=[adapter.normalize_record(raw) for raw in result.raw_events[:requested_size]],
                    total_results=result.total_results,
                    total_pages=result.total_pages,
                    page_size=result.page_size,
                    requests_made=requests_made,
                    strategies_tried=tried,
                    item_errors=item_errors,
                )

            logger.info(
                f"{adapter.display_name} strategy '{strategy.keyword}' found nothing"
                + (f": {result.error}" if result.error else ""),
                extra={"provider": adapter.name, "strategy": strategy.keyword},
            )

        return FallbackOutcome(
            provider=adapter.name,
            success=last.success if last else True,
            requests_made=requests_made,
            strategies_tried=tried,
            error=last.error if last else None,
            item_errors=item_errors,
        )

    async def _accumulate_until_full(
        self,
        adapter: ProviderAdapter,
        strategies: List[SearchStrategy],
        location: SearchLocation | None,
        requested_size: int,
        page: int,
    ) -> FallbackOutcome:
        accumulated = []
        seen = set()
        requests_made = 0
        tried = 0
        item_errors = []
        errors = []
        first: ProviderSearchResult | None = None

        for strategy in strategies[: self.accumulate_limit]:
            tried += 1
            result = await fetch_up_to(adapter, strategy, location, adapter.page_cap, page)
            requests_made += result.requests_made
            item_errors.extend(result.item_errors)

            if not result.success:
                errors.append(result.error or "unknown error")
                logger.warning(
                    f"{adapter.display_name} strategy '{strategy.keyword}' failed, continuing: {result.error}",
                    extra={"provider": adapter.name, "strategy": strategy.keyword},
                )
                continue

            if first is None:
                first = result
            for raw in result.raw_events:
                event = adapter.normalize_record(raw)
                if event.identity in seen:
                    continue
                seen.add(event.identity)
                accumulated.append(event)

            logger.info(
                f"{adapter.display_name} strategy '{strategy.keyword}': {len(accumulated)}/{requested_size} accumulated",
                extra={"provider": adapter.name, "strategy": strategy.keyword, "events": len(accumulated)},
            )
            if len(accumulated) >= requested_size:
                break

        all_failed = tried > 0 and first is None
        return FallbackOutcome(
            provider=adapter.name,
            success=not all_failed,
            events=accumulated[:requested_size],
            total_results=first.total_results if first else 0,
            total_pages=first.total_pages if first else 0,
            page_size=first.page_size if first else 0,
            requests_made=requests_made,
            strategies_tried=tried,
            error=errors[-1] if all_failed else None,
            item_errors=item_errors,
        )
