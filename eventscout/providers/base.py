"""Provider adapter contract shared by every event source."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextvars import ContextVar
from typing import Any

import httpx

from eventscout.exceptions import ProviderError, ProviderUnavailable
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.normalize import bare_event, normalize
from eventscout.search.pagination import fetch_up_to
from eventscout.search.schemas import (
    NormalizedEvent,
    ProviderSearchResult,
    RawProviderRecord,
    SearchLocation,
    SearchStrategy,
)

logger = logging.getLogger(__name__)

SINGLE_PAGE_THRESHOLD = 20

# Catalogue payloads fetched during the current search() call, keyed by URL
_listing_cache: ContextVar[dict[str, Any] | None] = ContextVar("provider_listing_cache", default=None)


class ProviderAdapter(ABC):
    """
    Executes one search strategy against one external provider.

    Subclasses implement ``_fetch_page`` (exactly one logical request, raising
    ProviderError on failure) and usually ``normalize``. The public ``search``
    and ``fetch_page`` methods never raise for HTTP errors, timeouts or
    malformed payloads; those come back as ``success=False``.
    """

    name: str = "provider"
    display_name: str = "Provider"
    page_cap: int = SINGLE_PAGE_THRESHOLD
    single_page_threshold: int = SINGLE_PAGE_THRESHOLD
    page_delay: float = 0.0
    max_pages: int | None = None
    policy: FallbackPolicy = FallbackPolicy.FIRST_SUCCESS

    def __init__(
        self,
        timeout: float = 10.0,
        page_delay: float | None = None,
        policy: FallbackPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        if page_delay is not None:
            self.page_delay = page_delay
        if policy is not None:
            self.policy = policy
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Whether the provider has the credentials it needs."""
        return True

    def ensure_configured(self) -> None:
        """
        Raises:
            ProviderUnavailable: If the provider has no usable credential
        """
        if not self.is_configured:
            raise ProviderUnavailable(self.name)

    def unconfigured_result(self) -> ProviderSearchResult:
        return ProviderSearchResult(success=True, raw_events=[], total_results=0, requests_made=0)

    async def search(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int = 0,
    ) -> ProviderSearchResult:
        """Run one strategy: a single request for small sizes, paginated otherwise."""
        try:
            self.ensure_configured()
        except ProviderUnavailable as e:
            logger.debug(f"{e}, skipping", extra={"provider": self.name})
            return self.unconfigured_result()
        token = _listing_cache.set({})
        try:
            if size <= self.single_page_threshold:
                return await self.fetch_page(strategy, location, size, page)
            return await fetch_up_to(self, strategy, location, size, page)
        finally:
            _listing_cache.reset(token)

    async def fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        """Issue exactly one page request and convert failures into a result."""
        if not self.is_configured:
            return self.unconfigured_result()
        try:
            return await self._fetch_page(strategy, location, size, page)
        except ProviderError as e:
            logger.error(
                f"{self.display_name} search failed for '{strategy.keyword}': {e}",
                extra={"provider": self.name, "strategy": strategy.keyword, "page": page},
            )
            return ProviderSearchResult(success=False, error=e.message, current_page=page, requests_made=1)
        except (ValueError, TypeError, KeyError) as e:
            # payload decoded but its shape did not fit the result model
            logger.error(
                f"{self.display_name} returned a malformed payload for '{strategy.keyword}': {e}",
                extra={"provider": self.name, "strategy": strategy.keyword, "page": page},
            )
            return ProviderSearchResult(
                success=False, error=f"malformed payload: {e}", current_page=page, requests_made=1
            )

    @abstractmethod
    async def _fetch_page(
        self,
        strategy: SearchStrategy,
        location: SearchLocation | None,
        size: int,
        page: int,
    ) -> ProviderSearchResult:
        """Provider-specific single request. Raises ProviderError on failure."""

    def normalize(self, raw: RawProviderRecord) -> NormalizedEvent:
        return normalize(raw, self.name)

    def normalize_record(self, raw: RawProviderRecord) -> NormalizedEvent:
        """Normalize without ever dropping the record."""
        try:
            return self.normalize(raw)
        except Exception as e:
            logger.warning(
                f"{self.display_name} record mapping failed ({e}), using generic fields",
                extra={"provider": self.name},
            )
        try:
            return normalize(raw, self.name)
        except Exception as e:
            logger.warning(
                f"{self.display_name} generic mapping failed ({e}), keeping title and link only",
                extra={"provider": self.name},
            )
            return bare_event(raw, self.name)

    async def _get_listing(self, url: str) -> tuple[Any, int]:
        """
        GET a full catalogue once per ``search`` call.

        Returns the decoded payload and the number of requests this call cost
        (0 when an earlier page of the same search already fetched it).

        Raises:
            ProviderError: As ``_get_json``; failures are not cached
        """
        cache = _listing_cache.get()
        if cache is not None and url in cache:
            return cache[url], 0
        data = await self._get_json(url)
        if cache is not None:
            cache[url] = data
        return data, 1

    def _headers(self) -> dict[str, str]:
        return {"Accept": "application/json", "User-Agent": "EventScout/1.0"}

    def _client(self, headers: dict[str, str] | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout,
            headers=headers or self._headers(),
            follow_redirects=True,
            transport=self._transport,
        )

    def _error_message(self, response: httpx.Response) -> str:
        """Best human-readable error text from a failed response."""
        return response.text[:500] if response.text else response.reason_phrase

    async def _get_json(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """
        GET a JSON document.

        Raises:
            ProviderError: On HTTP status errors, transport errors/timeouts and
                malformed JSON
        """
        async with self._client(headers) as client:
            try:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response.json()
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status == 429:
                    logger.warning(f"{self.display_name} rate limit exceeded", extra={"provider": self.name})
                raise ProviderError(self.name, self._error_message(e.response), status) from e
            except httpx.RequestError as e:
                raise ProviderError(self.name, f"request failed: {e!r}") from e
            except ValueError as e:
                raise ProviderError(self.name, f"malformed JSON payload: {e}") from e
