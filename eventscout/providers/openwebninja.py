"""OpenWebNinja real-time events provider."""

from __future__ import annotations

import logging

from eventscout.providers.base import ProviderAdapter
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.normalize import as_records, build_event, safe_get, text_of
from eventscout.search.schemas import (
    NormalizedEvent,
    ProviderSearchResult,
    RawProviderRecord,
    SearchLocation,
    SearchStrategy,
)

logger = logging.getLogger(__name__)


class OpenWebNinjaProvider(ProviderAdapter):
    name = "openwebninja"
    display_name = "OpenWebNinja"
    page_cap = 20
    max_pages = 5
    policy = FallbackPolicy.ACCUMULATE_UNTIL_FULL

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openwebninja.com/realtime-events-data",
        timeout: float = 10.0,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> dict[str, str]:
        return {**super()._headers(), "X-API-Key": self.api_key}

    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        url = f"{self.base_url}/search-events"
        size = min(max(1, size), self.page_cap)
        query = strategy.keyword
        if location and location.city:
            query = f"{query} in {location.city}"
        params = {"query": query, "date": "any", "is_virtual": "false", "start": page * size}
        logger.info(f"OpenWebNinja request: {url} with params: {params}", extra={"provider": self.name})

        data = await self._get_json(url, params=params)
        if isinstance(data, dict) and str(data.get("status", "OK")).upper() == "ERROR":
            message = text_of(safe_get(data, "error", "message")) or text_of(data.get("error")) or "unknown error"
            return ProviderSearchResult(success=False, error=message, current_page=page, requests_made=1)

        events = as_records(safe_get(data, "data"))
        return ProviderSearchResult(
            success=True,
            raw_events=events,
            total_results=len(events),
            total_pages=self.max_pages or 1,
            current_page=page,
            page_size=size,
            requests_made=1,
        )

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        venue = raw.get("venue") if isinstance(raw.get("venue"), dict) else {}
        return build_event(
            self.name,
            title=raw.get("name"),
            description=raw.get("description"),
            url=raw.get("link"),
            source_id=raw.get("event_id"),
            start_date=raw.get("start_time_utc") or raw.get("start_time"),
            end_date=raw.get("end_time_utc") or raw.get("end_time"),
            location=venue.get("full_address") or venue.get("city"),
            venue=venue.get("name"),
            image_url=raw.get("thumbnail"),
            organizer=raw.get("publisher"),
            is_virtual=raw.get("is_virtual") if isinstance(raw.get("is_virtual"), bool) else None,
        )
