"""Scripted provider adapter and record builders shared by the tests."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from eventscout.exceptions import ProviderError
from eventscout.providers.base import ProviderAdapter
from eventscout.search.schemas import ProviderSearchResult


class FakeAdapter(ProviderAdapter):
    """Adapter that replays scripted page results and records every call."""

    def __init__(
        self,
        responses=None,
        name: str = "fake",
        configured: bool = True,
        page_cap: int = 20,
        max_pages: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("page_delay", 0)
        super().__init__(**kwargs)
        self.name = name
        self.display_name = name.title()
        self.page_cap = page_cap
        self.max_pages = max_pages
        self.responses = list(responses or [])
        self.calls = []
        self._configured = configured

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def _fetch_page(self, strategy, location, size, page):
        self.calls.append((strategy.keyword, size, page))
        response = self.responses.pop(0) if self.responses else ok()
        if isinstance(response, Exception):
            raise response
        return response


def records(*ids, **fields):
    """Raw records with the given ids, shaped for the generic normalizer."""
    return [{"id": str(i), "title": f"Event {i}", **fields} for i in ids]


def ok(raw=None, total=None, pages=1):
    raw = raw or []
    return ProviderSearchResult(
        success=True,
        raw_events=raw,
        total_results=len(raw) if total is None else total,
        total_pages=pages,
        page_size=len(raw),
        requests_made=1,
    )


def failed(message="HTTP 500"):
    return ProviderError("fake", message)


def future(days=30):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def past(days=3):
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()
