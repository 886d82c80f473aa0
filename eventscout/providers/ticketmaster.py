"""Ticketmaster Discovery API provider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from eventscout.providers.base import ProviderAdapter
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.normalize import as_count, as_records, build_event, safe_get, text_of
from eventscout.search.schemas import (
    NormalizedEvent,
    ProviderSearchResult,
    RawProviderRecord,
    SearchLocation,
    SearchStrategy,
)

logger = logging.getLogger(__name__)

MIN_KEY_LENGTH = 10


class TicketmasterProvider(ProviderAdapter):
    """Search events via the Ticketmaster Discovery v2 ``events.json`` endpoint."""

    name = "ticketmaster"
    display_name = "Ticketmaster API"
    page_cap = 200
    page_delay = 0.1
    policy = FallbackPolicy.FIRST_SUCCESS

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://app.ticketmaster.com/discovery/v2",
        timeout: float = 10.0,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.api_key = (api_key or "").strip()
        self.base_url = base_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        # Placeholder values shorter than a real key are treated as unset
        return len(self.api_key) >= MIN_KEY_LENGTH

    def _error_message(self, response: httpx.Response) -> str:
        try:
            fault = response.json().get("fault", {}).get("faultstring")
        except (ValueError, AttributeError):
            fault = None
        return fault or super()._error_message(response)

    def _params(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "apikey": self.api_key,
            "keyword": strategy.keyword,
            "size": min(size, self.page_cap),
            "page": page,
        }
        if strategy.classification_name:
            params["classificationName"] = strategy.classification_name
        if strategy.classification_id:
            params["classificationId"] = strategy.classification_id
        if location and location.city:
            params["city"] = location.city
        if location and location.country_code:
            params["countryCode"] = location.country_code
        return params

    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        url = f"{self.base_url}/events.json"
        params = self._params(strategy, location, size, page)
        safe_params = {k: v for k, v in params.items() if k != "apikey"}
        logger.info(f"Ticketmaster API request: {url} with params: {safe_params}", extra={"provider": self.name})

        data = await self._get_json(url, params=params)
        events = as_records(safe_get(data, "_embedded", "events"))

        return ProviderSearchResult(
            success=True,
            raw_events=events,
            total_results=as_count(safe_get(data, "page", "totalElements")),
            total_pages=as_count(safe_get(data, "page", "totalPages")),
            current_page=as_count(safe_get(data, "page", "number"), page),
            page_size=as_count(safe_get(data, "page", "size"), len(events)),
            requests_made=1,
        )

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        venue = safe_get(raw, "_embedded", "venues", 0, default={})
        city = text_of(safe_get(venue, "city", "name"))
        state = text_of(safe_get(venue, "state", "name"))
        country = text_of(safe_get(venue, "country", "name"))
        location = ", ".join(p for p in (city, state, country) if p)

        price_ranges = raw.get("priceRanges") or []
        priced = [p for p in price_ranges if isinstance(p, dict) and isinstance(p.get("min"), (int, float))]
        cheapest = min(priced, key=lambda p: p["min"]) if priced else {}

        images = [i for i in raw.get("images") or [] if isinstance(i, dict) and i.get("url")]
        widest = max(images, key=lambda i: i.get("width") or 0) if images else {}

        return build_event(
            self.name,
            title=raw.get("name"),
            description=raw.get("info") or raw.get("description") or raw.get("pleaseNote"),
            url=raw.get("url"),
            source_id=raw.get("id"),
            start_date=safe_get(raw, "dates", "start", "dateTime") or safe_get(raw, "dates", "start", "localDate"),
            end_date=safe_get(raw, "dates", "end", "dateTime") or safe_get(raw, "dates", "end", "localDate"),
            location=location or None,
            venue=safe_get(venue, "name"),
            price=cheapest.get("min"),
            currency=cheapest.get("currency"),
            image_url=widest.get("url"),
            organizer=safe_get(raw, "_embedded", "attractions", 0, "name"),
            category=safe_get(raw, "classifications", 0, "segment", "name"),
        )
