"""Pagination aggregator: drives one adapter across sequential pages."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING

from eventscout.search.schemas import ProviderSearchResult, SearchLocation, SearchStrategy

if TYPE_CHECKING:
    from eventscout.providers.base import ProviderAdapter

logger = logging.getLogger(__name__)


async def fetch_up_to(
    adapter: ProviderAdapter,
    strategy: SearchStrategy,
    location: SearchLocation | None,
    requested_size: int,
    start_page: int = 0,
) -> ProviderSearchResult:
    """
    Fetch pages sequentially until requested_size records are collected.

    Stops early when the accumulated count reaches requested_size, when a page
    lists fewer items than the provider's page cap (supply exhausted), or when
    the computed page budget is spent. Items whose detail fetch failed still
    count as listed, so a partial failure never ends pagination. Totals are
    taken from the first page. A page failure ends pagination; the result is
    successful only if something was already accumulated.
    """
    page_cap = max(1, adapter.page_cap)
    pages_needed = math.ceil(requested_size / page_cap)
    if adapter.max_pages:
        pages_needed = min(pages_needed, adapter.max_pages)
    page_size = min(requested_size, page_cap)

    accumulated = []
    item_errors = []
    first: ProviderSearchResult | None = None
    requests_made = 0
    error = None

    for i in range(pages_needed):
        if i > 0 and adapter.page_delay > 0:
            await asyncio.sleep(adapter.page_delay)

        page = start_page + i
        result = await adapter.fetch_page(strategy, location, page_size, page)
        requests_made += result.requests_made
        item_errors.extend(result.item_errors)

        if not result.success:
            error = result.error
            logger.warning(
                f"{adapter.name} page {page} failed for '{strategy.keyword}': {error}",
                extra={"provider": adapter.name, "strategy": strategy.keyword, "page": page},
            )
            break

        if first is None:
            first = result
        accumulated.extend(result.raw_events)

        if len(accumulated) >= requested_size:
            break
        listed = result.listed_count if result.listed_count is not None else len(result.raw_events)
        if listed < page_cap:
            logger.debug(f"{adapter.name} page {page} listed {listed} < {page_cap}, stopping")
            break

    logger.info(
        f"{adapter.name} paginated search for '{strategy.keyword}': "
        f"{len(accumulated)} records in {requests_made} requests",
        extra={"provider": adapter.name, "strategy": strategy.keyword, "requests_made": requests_made},
    )

    return ProviderSearchResult(
        success=bool(accumulated) if error else True,
        raw_events=accumulated[:requested_size],
        total_results=first.total_results if first else 0,
        total_pages=first.total_pages if first else 0,
        current_page=start_page,
        page_size=page_size,
        error=error,
        requests_made=requests_made,
        item_errors=item_errors,
    )
