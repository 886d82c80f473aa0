"""Pretalx provider: enumerate event slugs, then fetch talk details per event."""

from __future__ import annotations

import logging
import math
from typing import Any

from eventscout.providers.base import ProviderAdapter
from eventscout.search.details import DEFAULT_WINDOW_DELAY, DEFAULT_WINDOW_SIZE, fetch_details
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


def event_name(value: Any) -> str:
    """Pretalx names are either plain strings or {locale: text} dicts."""
    if isinstance(value, dict):
        return text_of(value.get("en")) or next((text_of(v) for v in value.values() if text_of(v)), "")
    return text_of(value)


class PretalxProvider(ProviderAdapter):
    """
    Conference CFPs hosted on pretalx.

    The events listing only yields identifiers (slugs); each event's talk list
    is a second request, fetched in bounded concurrent windows.
    """

    name = "pretalx"
    display_name = "Pretalx"
    page_cap = 50
    policy = FallbackPolicy.FIRST_SUCCESS

    def __init__(
        self,
        base_url: str = "https://pretalx.com",
        timeout: float = 10.0,
        window_size: int = DEFAULT_WINDOW_SIZE,
        window_delay: float = DEFAULT_WINDOW_DELAY,
        **kwargs,
    ):
        super().__init__(timeout=timeout, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.window_size = window_size
        self.window_delay = window_delay

    async def list_events(self) -> tuple[list[dict], int]:
        """
        Fetch the public events listing (slug, name, dates).

        Returns the events and the requests spent; the listing is downloaded
        at most once per ``search`` call.
        """
        url = f"{self.base_url}/api/events/"
        data, requests = await self._get_listing(url)
        if requests:
            logger.info(f"Pretalx events request: {url}")
        results = safe_get(data, "results") if isinstance(data, dict) else data
        events = [{**e, "slug": text_of(e.get("slug"))} for e in as_records(results)]
        return [e for e in events if e["slug"]], requests

    async def fetch_event_details(self, event: dict) -> dict:
        """Fetch one event's talks. Raises ProviderError on failure."""
        slug = event["slug"]
        url = f"{self.base_url}/{slug}/api/talks/"
        data = await self._get_json(url)
        talks = safe_get(data, "results", default=[]) if isinstance(data, dict) else data
        talks = talks if isinstance(talks, list) else []
        count = safe_get(data, "count", default=len(talks)) if isinstance(data, dict) else len(talks)
        return {
            **event,
            "event_url": f"{self.base_url}/{slug}/",
            "talk_count": count,
            "talks": talks,
        }

    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        events, listing_requests = await self.list_events()
        matched = [
            e for e in events
            if keyword_matches(strategy.keyword, e["slug"].replace("-", " "), event_name(e.get("name")))
        ]
        size = max(1, size)
        selected = matched[page * size:(page + 1) * size]
        by_slug = {e["slug"]: e for e in selected}

        details = await fetch_details(
            list(by_slug),
            lambda slug: self.fetch_event_details(by_slug[slug]),
            window_size=self.window_size,
            delay=self.window_delay,
        )
        logger.info(
            f"Pretalx: {len(matched)} events match '{strategy.keyword}', "
            f"{details.successful} detailed, {details.failed} failed",
            extra={"provider": self.name, "strategy": strategy.keyword},
        )

        all_failed = bool(selected) and not details.items
        return ProviderSearchResult(
            success=not all_failed,
            raw_events=details.items,
            total_results=len(matched),
            total_pages=math.ceil(len(matched) / size),
            current_page=page,
            page_size=size,
            error="all event detail requests failed" if all_failed else None,
            requests_made=listing_requests + len(selected),
            item_errors=details.errors,
            listed_count=len(selected),
        )

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        title = event_name(raw.get("name")) or text_of(raw.get("slug")).replace("-", " ").title()
        talk_count = raw.get("talk_count") or 0
        return build_event(
            self.name,
            title=title,
            description=f"Pretalx event with {talk_count} talk submissions",
            url=raw.get("event_url") or safe_get(raw, "urls", "base"),
            source_id=raw.get("slug"),
            start_date=raw.get("date_from"),
            end_date=raw.get("date_to"),
            event_type="Conference",
        )
