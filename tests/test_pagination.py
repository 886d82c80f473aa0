"""Tests for the pagination aggregator and the adapter call shape."""

from unittest.mock import AsyncMock, patch

import pytest

from eventscout.search.pagination import fetch_up_to
from eventscout.search.schemas import SearchLocation, SearchStrategy
from helpers import FakeAdapter, failed, ok, records

STRATEGY = SearchStrategy(keyword="data summit")
LOCATION = SearchLocation(city="Austin", country_code="US")


@pytest.mark.asyncio
async def test_short_page_stops_pagination():
    """A page shorter than the cap means supply is exhausted: no further calls."""
    adapter = FakeAdapter(
        [ok(records(*range(200)), total=250, pages=2), ok(records(*range(200, 250)), total=999, pages=9)],
        page_cap=200,
    )

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 1000)

    assert len(adapter.calls) == 2
    assert [c[2] for c in adapter.calls] == [0, 1]
    assert len(result.raw_events) == 250
    assert result.total_results == 250
    assert result.total_pages == 2
    assert result.requests_made == 2
    assert result.success


@pytest.mark.asyncio
async def test_truncates_to_requested_size():
    """Full pages are trimmed to exactly the requested count."""
    adapter = FakeAdapter([ok(records(*range(20))), ok(records(*range(20, 40)))], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 30)

    assert len(adapter.calls) == 2
    assert len(result.raw_events) == 30
    assert all(call[1] == 20 for call in adapter.calls)


@pytest.mark.asyncio
async def test_first_page_failure_is_unsuccessful():
    """Nothing accumulated before the failure means success=False."""
    adapter = FakeAdapter([failed("HTTP 503")], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 60)

    assert not result.success
    assert result.error == "HTTP 503"
    assert result.raw_events == []
    assert len(adapter.calls) == 1


@pytest.mark.asyncio
async def test_later_page_failure_keeps_accumulated_records():
    """A failure after some data ends pagination but keeps what was fetched."""
    adapter = FakeAdapter([ok(records(*range(20))), failed("timeout"), ok(records(1))], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 60)

    assert result.success
    assert result.error == "timeout"
    assert len(result.raw_events) == 20
    assert len(adapter.calls) == 2


@pytest.mark.asyncio
async def test_start_page_offsets_requests():
    """Pages are requested from start_page onward."""
    adapter = FakeAdapter([ok(records(*range(20))), ok(records(1))], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 40, start_page=3)

    assert [c[2] for c in adapter.calls] == [3, 4]
    assert result.current_page == 3


@pytest.mark.asyncio
async def test_max_pages_caps_page_budget():
    """Providers with a page limit never exceed it."""
    adapter = FakeAdapter([ok(records(*range(10))) for _ in range(5)], page_cap=10, max_pages=2)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 100)

    assert len(adapter.calls) == 2
    assert len(result.raw_events) == 20


@pytest.mark.asyncio
async def test_delay_between_pages_only():
    """The fixed delay is inserted between pages, not before the first."""
    adapter = FakeAdapter([ok(records(*range(20))), ok(records(*range(20))), ok(records(1))], page_cap=20, page_delay=0.5)

    with patch("eventscout.search.pagination.asyncio.sleep", new_callable=AsyncMock) as sleep:
        await fetch_up_to(adapter, STRATEGY, LOCATION, 60)

    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.5)


@pytest.mark.asyncio
async def test_small_request_issues_single_call():
    """Sizes at or below the threshold go straight to one request."""
    adapter = FakeAdapter([ok(records(*range(20))), ok(records(*range(20)))], page_cap=200)

    result = await adapter.search(STRATEGY, LOCATION, 20)

    assert len(adapter.calls) == 1
    assert len(result.raw_events) == 20


@pytest.mark.asyncio
async def test_large_request_paginates():
    """Sizes above the threshold are paginated."""
    adapter = FakeAdapter([ok(records(*range(20))), ok(records(*range(20, 35)))], page_cap=20)

    result = await adapter.search(STRATEGY, LOCATION, 50)

    assert len(adapter.calls) == 2
    assert len(result.raw_events) == 35


@pytest.mark.asyncio
async def test_unconfigured_adapter_makes_no_calls():
    """No credential: empty success and zero requests."""
    adapter = FakeAdapter([ok(records(1))], configured=False)

    result = await adapter.search(STRATEGY, LOCATION, 500)

    assert result.success
    assert result.raw_events == []
    assert result.requests_made == 0
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_partially_failed_page_does_not_end_pagination():
    """A page that listed a full cap keeps paging even if some details failed."""
    partial = ok(records(*range(19)), total=60, pages=3)
    partial.listed_count = 20
    adapter = FakeAdapter([partial, ok(records(*range(20, 40))), ok(records(*range(40, 60)))], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 60)

    assert [c[2] for c in adapter.calls] == [0, 1, 2]
    assert len(result.raw_events) == 59


@pytest.mark.asyncio
async def test_short_listing_still_stops_pagination():
    """listed_count below the cap is exhaustion, whatever the success count."""
    short = ok(records(*range(5)))
    short.listed_count = 8
    adapter = FakeAdapter([short, ok(records(*range(5, 25)))], page_cap=20)

    result = await fetch_up_to(adapter, STRATEGY, LOCATION, 40)

    assert len(adapter.calls) == 1
    assert len(result.raw_events) == 5
