"""Tests for the fallback controller policies."""

import pytest

from eventscout.search.fallback import FallbackController, FallbackPolicy, unique_strategies
from eventscout.search.schemas import SearchLocation, SearchStrategy
from helpers import FakeAdapter, failed, ok, records

LOCATION = SearchLocation(city="Berlin", country_code="DE")


@pytest.mark.asyncio
async def test_first_success_stops_at_first_non_empty_result(strategies):
    """[fail, fail, success(3)] issues exactly three calls and returns the three events."""
    adapter = FakeAdapter([failed(), failed(), ok(records("a", "b", "c"))])

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert [c[0] for c in adapter.calls] == [s.keyword for s in strategies]
    assert outcome.success
    assert [e.source_id for e in outcome.events] == ["a", "b", "c"]
    assert outcome.requests_made == 3
    assert outcome.strategies_tried == 3


@pytest.mark.asyncio
async def test_first_success_skips_empty_successes(strategies):
    """An empty but successful page moves on to the next strategy."""
    adapter = FakeAdapter([ok([]), ok(records("x"))])

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert len(adapter.calls) == 2
    assert [e.source_id for e in outcome.events] == ["x"]


@pytest.mark.asyncio
async def test_first_success_reports_last_error_when_exhausted(strategies):
    """No strategy succeeds: the last attempt's error comes back."""
    adapter = FakeAdapter([failed("first"), failed("second"), failed("third")])

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert not outcome.success
    assert outcome.error == "third"
    assert outcome.events == []


@pytest.mark.asyncio
async def test_accumulate_until_full_dedupes_across_strategies(strategies):
    """Three strategies of four events with two repeats yield exactly ten unique events."""
    adapter = FakeAdapter(
        [
            ok(records(1, 2, 3, 4)),
            ok(records(4, 5, 6, 7)),
            ok(records(7, 8, 9, 10)),
        ],
        page_cap=4,
        policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL,
    )

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert len(adapter.calls) <= 3
    assert len(outcome.events) == 10
    assert len({e.identity for e in outcome.events}) == 10
    assert outcome.success


@pytest.mark.asyncio
async def test_accumulate_requests_single_page_at_cap(strategies):
    """Each strategy fetches one page at the provider's cap, whatever the requested size."""
    adapter = FakeAdapter(
        [ok(records(*range(50)))],
        page_cap=50,
        policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL,
    )

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 5)

    assert adapter.calls == [("cloud computing conference", 50, 0)]
    assert len(outcome.events) == 5


@pytest.mark.asyncio
async def test_accumulate_continues_after_strategy_failure(strategies):
    """A failing strategy is logged and skipped, not fatal."""
    adapter = FakeAdapter(
        [failed("HTTP 502"), ok(records(1, 2)), ok(records(3))],
        page_cap=4,
        policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL,
    )

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert outcome.success
    assert [e.source_id for e in outcome.events] == ["1", "2", "3"]
    assert outcome.strategies_tried == 3


@pytest.mark.asyncio
async def test_accumulate_limits_strategies():
    """Only the first K strategies are tried."""
    many = [SearchStrategy(keyword=f"keyword {i}", priority=i + 1) for i in range(6)]
    adapter = FakeAdapter(page_cap=4, policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL)

    outcome = await FallbackController(accumulate_limit=3).run(adapter, many, LOCATION, 10)

    assert len(adapter.calls) == 3
    assert outcome.success
    assert outcome.events == []


@pytest.mark.asyncio
async def test_accumulate_all_failed(strategies):
    """Every strategy failing makes the outcome unsuccessful."""
    adapter = FakeAdapter(
        [failed("a"), failed("b"), failed("c")],
        page_cap=4,
        policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL,
    )

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert not outcome.success
    assert outcome.error == "c"


@pytest.mark.asyncio
async def test_duplicate_keyword_skipped_before_any_call():
    """The lower priority number wins; the later duplicate is never requested."""
    duplicated = [
        SearchStrategy(keyword="devops days", priority=3),
        SearchStrategy(keyword="Cloud Summit", priority=1),
        SearchStrategy(keyword="cloud  summit", priority=2, classification_id="other"),
    ]
    adapter = FakeAdapter([failed(), failed(), failed()])

    await FallbackController().run(adapter, duplicated, LOCATION, 10)

    assert [c[0] for c in adapter.calls] == ["Cloud Summit", "devops days"]


def test_unique_strategies_orders_by_priority():
    """Stable priority order with duplicates removed."""
    result = unique_strategies(
        [
            SearchStrategy(keyword="b", priority=2),
            SearchStrategy(keyword="a", priority=1),
            SearchStrategy(keyword="B", priority=5),
        ]
    )
    assert [s.keyword for s in result] == ["a", "b"]


@pytest.mark.asyncio
async def test_unconfigured_provider_is_empty_success(strategies):
    """Missing credentials are not a failure and make no calls."""
    adapter = FakeAdapter([ok(records(1))], configured=False)

    outcome = await FallbackController().run(adapter, strategies, LOCATION, 10)

    assert outcome.success
    assert not outcome.configured
    assert outcome.events == []
    assert adapter.calls == []
