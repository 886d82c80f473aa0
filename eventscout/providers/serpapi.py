"""SerpAPI (Google web search) provider."""

from __future__ import annotations

import logging

from eventscout.providers.base import ProviderAdapter
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.normalize import (
    as_count,
    as_records,
    build_event,
    extract_location,
    find_date_in_text,
    parse_price,
    safe_get,
    text_of,
)
from eventscout.search.schemas import (
    NormalizedEvent,
    ProviderSearchResult,
    RawProviderRecord,
    SearchLocation,
    SearchStrategy,
)

logger = logging.getLogger(__name__)

EVENT_QUERY_SUFFIX = " event OR conference OR summit OR meeting OR workshop OR symposium OR convention"


class SerpApiProvider(ProviderAdapter):
    """Web search for event pages through SerpAPI's Google engine."""

    name = "serpapi"
    display_name = "SerpAPI"
    page_cap = 100
    page_delay = 1.0
    max_pages = 5
    policy = FallbackPolicy.ACCUMULATE_UNTIL_FULL

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://serpapi.com/search",
        timeout: float = 30.0,
        default_location: str = "United States",
        max_pages: int | None = None,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.api_key = (api_key or "").strip()
        self.base_url = base_url
        self.default_location = default_location
        if max_pages is not None:
            self.max_pages = max_pages

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        num = min(size, self.page_cap)
        params = {
            "q": f"{strategy.keyword}{EVENT_QUERY_SUFFIX}",
            "location": (location.city if location and location.city else None) or self.default_location,
            "num": num,
            "start": page * num,
            "api_key": self.api_key,
            "engine": "google",
            "google_domain": "google.com",
            "hl": "en",
            "gl": "us",
        }
        logger.info(
            f"SerpAPI request: {self.base_url} for query: {strategy.keyword[:50]} (page {page})",
            extra={"provider": self.name},
        )

        data = await self._get_json(self.base_url, params=params)
        if isinstance(data, dict) and data.get("error"):
            # SerpAPI reports "no results" as an error string on a 200
            if "hasn't returned any results" in str(data["error"]):
                return ProviderSearchResult(success=True, current_page=page, page_size=num, requests_made=1)
            return ProviderSearchResult(success=False, error=str(data["error"]), current_page=page, requests_made=1)

        results = as_records(safe_get(data, "organic_results"))
        total = as_count(safe_get(data, "search_information", "total_results"), len(results))
        logger.info(f"SerpAPI returned {len(results)} results for query: {strategy.keyword[:50]}")

        return ProviderSearchResult(
            success=True,
            raw_events=results,
            total_results=total,
            total_pages=self.max_pages or 1,
            current_page=page,
            page_size=num,
            requests_made=1,
        )

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        title = text_of(raw.get("title"))
        snippet = text_of(raw.get("snippet"))
        text = f"{title} {snippet}"
        amount, currency = parse_price(snippet)

        return build_event(
            self.name,
            title=title,
            description=snippet,
            url=raw.get("link"),
            start_date=find_date_in_text(text),
            location=extract_location(text),
            price=amount,
            currency=currency,
            image_url=raw.get("thumbnail"),
        )
