"""Event search orchestration: strategies -> providers -> filters -> aggregated result."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Protocol, Sequence

from eventscout.exceptions import PartialFailure, ProviderError
from eventscout.providers.base import ProviderAdapter
from eventscout.search.fallback import FallbackController
from eventscout.search.filters import dedupe, drop_expired
from eventscout.search.schemas import (
    AggregatedResult,
    FallbackOutcome,
    NormalizedEvent,
    SaveResult,
    SearchRequest,
    SearchStrategy,
    build_search_request,
)
from eventscout.search.strategies import StrategyGenerator

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Write-behind persistence for search results, idempotent on event identity."""

    def save(self, events: List[NormalizedEvent]) -> SaveResult: ...


class EventSearchEngine:
    """
    Runs one search across every provider and merges the results.

    Providers are queried one after another, each under its own fallback
    policy. Expiry and de-duplication run once on the merged set, after
    which the list is cut to the requested size.
    """

    def __init__(
        self,
        providers: Sequence[ProviderAdapter],
        generator: StrategyGenerator | None = None,
        controller: FallbackController | None = None,
        sink: EventSink | None = None,
    ):
        self.providers = list(providers)
        self.generator = generator or StrategyGenerator()
        self.controller = controller or FallbackController()
        self.sink = sink

    async def preview_strategies(self, request: SearchRequest | Dict[str, Any]) -> List[SearchStrategy]:
        """Return the strategies a search would use, without querying providers."""
        request = self._coerce(request)
        return await self.generator.generate(request.industry, request.topic, request.keyword)

    async def search(self, request: SearchRequest | Dict[str, Any]) -> AggregatedResult:
        """
        Execute a search request.

        Args:
            request: SearchRequest or a raw payload dict

        Returns:
            AggregatedResult with at most ``requested_size`` unique, unexpired events

        Raises:
            ValidationError: If the request is malformed (before any network call)
            ProviderError: If every configured provider failed and nothing was found
        """
        request = self._coerce(request)
        strategies = await self.generator.generate(request.industry, request.topic, request.keyword)
        location = request.location
        logger.info(
            f"Searching {len(self.providers)} providers with {len(strategies)} strategies "
            f"(size={request.requested_size}, page={request.page})"
        )

        outcomes: List[FallbackOutcome] = []
        for provider in self.providers:
            outcome = await self.controller.run(provider, strategies, location, request.requested_size, request.page)
            outcomes.append(outcome)

        errors = self._collect_errors(outcomes)
        candidates = [event for outcome in outcomes for event in outcome.events]

        configured = [o for o in outcomes if o.configured]
        if configured and not candidates and all(not o.success for o in configured):
            message = "; ".join(errors) or "all providers failed"
            logger.error(f"Every provider failed: {message}")
            raise ProviderError("all", message)

        events = dedupe(drop_expired(candidates))[: request.requested_size]
        logger.info(f"Search complete: {len(candidates)} fetched, {len(events)} returned")

        if self.sink is not None and events:
            errors.extend(await self._save(events))

        contributing = [o.provider for o in outcomes if o.events]
        names = {p.name: p.display_name for p in self.providers}
        return AggregatedResult(
            events=events,
            total_results=sum(o.total_results for o in outcomes),
            total_pages=max((o.total_pages for o in outcomes), default=0),
            current_page=request.page,
            page_size=max((o.page_size for o in outcomes), default=0),
            requests_made=sum(o.requests_made for o in outcomes),
            events_fetched=len(candidates),
            max_requested=request.requested_size,
            query=strategies[0].keyword,
            location=location.label,
            source=", ".join(names.get(p, p) for p in contributing),
            strategies_tried=max((o.strategies_tried for o in outcomes), default=0),
            errors=errors,
        )

    @staticmethod
    def _coerce(request: SearchRequest | Dict[str, Any]) -> SearchRequest:
        if isinstance(request, SearchRequest):
            return request
        return build_search_request(request)

    def _collect_errors(self, outcomes: List[FallbackOutcome]) -> List[str]:
        errors = []
        for outcome in outcomes:
            if not outcome.success and outcome.error:
                errors.append(f"{outcome.provider}: {outcome.error}")
            if outcome.item_errors:
                partial = PartialFailure(outcome.item_errors, succeeded=len(outcome.events))
                logger.warning(f"{outcome.provider} detail fetch: {partial}")
                errors.append(f"{outcome.provider}: {partial}")
        return errors

    async def _save(self, events: List[NormalizedEvent]) -> List[str]:
        try:
            result = await asyncio.to_thread(self.sink.save, events)
        except Exception as e:
            logger.error(f"Failed to persist {len(events)} events: {e}")
            return [f"sink: {e}"]
        logger.info(f"Persisted {result.saved} events")
        return [f"sink: {err}" for err in result.errors]
