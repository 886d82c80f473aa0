"""Call for Data Speakers provider (full-catalogue CFP list, no API key)."""

from __future__ import annotations

import logging
import math

from eventscout.providers.base import ProviderAdapter
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.normalize import as_records, build_event, keyword_matches, safe_get, text_of
from eventscout.search.schemas import (
    NormalizedEvent,
    ProviderSearchResult,
    RawProviderRecord,
    SearchLocation,
    SearchStrategy,
)

logger = logging.getLogger(__name__)


class CallForDataSpeakersProvider(ProviderAdapter):
    """
    Speaking opportunities from callfordataspeakers.com.

    The API returns the whole catalogue in one response, so keyword filtering
    and paging happen client-side.
    """

    name = "callfordataspeakers"
    display_name = "Call for Data Speakers"
    page_cap = 100
    policy = FallbackPolicy.FIRST_SUCCESS

    def __init__(
        self,
        base_url: str = "https://callfordataspeakers.com/api/events",
        timeout: float = 30.0,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.base_url = base_url

    def _matches(self, record: RawProviderRecord, strategy: SearchStrategy) -> bool:
        return keyword_matches(
            strategy.keyword,
            record.get("EventName"),
            record.get("Information"),
            record.get("EventType"),
            record.get("Venue"),
        )

    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        data, requests = await self._get_listing(self.base_url)
        if requests:
            logger.info(f"Call for Data Speakers request: {self.base_url} for keyword: {strategy.keyword}")

        records = as_records(data if isinstance(data, list) else safe_get(data, "events"))
        matched = [r for r in records if self._matches(r, strategy)]
        logger.info(f"Call for Data Speakers: {len(matched)} of {len(records)} events match '{strategy.keyword}'")

        size = max(1, size)
        start = page * size
        return ProviderSearchResult(
            success=True,
            raw_events=matched[start:start + size],
            total_results=len(matched),
            total_pages=math.ceil(len(matched) / size),
            current_page=page,
            page_size=size,
            requests_made=requests,
        )

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        return build_event(
            self.name,
            title=raw.get("EventName") or raw.get("title"),
            description=raw.get("Information") or raw.get("description"),
            url=raw.get("URL") or raw.get("website"),
            source_id=raw.get("id") or raw.get("event_id"),
            start_date=raw.get("Date"),
            end_date=raw.get("EndDate"),
            deadline=raw.get("Cfs_Closes"),
            location=raw.get("Venue") or text_of(raw.get("Regions")) or None,
            event_type=raw.get("EventType"),
            organizer=raw.get("organization") or raw.get("organizer"),
        )
