"""Tests for the search orchestration engine."""

from unittest.mock import MagicMock

import httpx
import pytest

from eventscout.exceptions import ProviderError, ValidationError
from eventscout.providers.callfordataspeakers import CallForDataSpeakersProvider
from eventscout.providers.ticketmaster import TicketmasterProvider
from eventscout.search.engine import EventSearchEngine
from eventscout.search.fallback import FallbackPolicy
from eventscout.search.schemas import DetailError, ProviderSearchResult, SaveResult, SearchRequest
from helpers import FakeAdapter, failed, future, ok, past, records

KEYWORD_REQUEST = {"keyword": "cloud native", "city": "Denver", "country_code": "US", "requested_size": 10}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"industry": "Technology"},
        {"keyword": "   "},
        {"keyword": "cloud", "requested_size": 0},
        {"keyword": "cloud", "requested_size": 1001},
        {"keyword": "cloud", "page": -1},
    ],
)
async def test_invalid_requests_rejected_before_network(payload):
    """Malformed requests raise ValidationError and no provider is called."""
    adapter = FakeAdapter([ok(records(1))])
    engine = EventSearchEngine([adapter])

    with pytest.raises(ValidationError):
        await engine.search(payload)
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_merges_providers_and_reports_metadata():
    """Events from each provider are merged and result metadata is filled."""
    first = FakeAdapter([ok(records("a", "b"), total=40, pages=2)], name="alpha")
    second = FakeAdapter([ok(records("c"), total=5, pages=1)], name="beta")
    engine = EventSearchEngine([first, second])

    result = await engine.search(KEYWORD_REQUEST)

    assert [(e.source_provider, e.source_id) for e in result.events] == [("alpha", "a"), ("alpha", "b"), ("beta", "c")]
    assert result.total_results == 45
    assert result.total_pages == 2
    assert result.requests_made == 2
    assert result.events_fetched == 3
    assert result.max_requested == 10
    assert result.query == "cloud native"
    assert result.location == "Denver, US"
    assert result.source == "Alpha, Beta"
    assert result.errors == []


@pytest.mark.asyncio
async def test_result_never_exceeds_requested_size():
    """The merged list is cut to requested_size."""
    adapters = [
        FakeAdapter([ok(records(*range(5)))], name="alpha"),
        FakeAdapter([ok(records(*range(5)))], name="beta"),
    ]
    engine = EventSearchEngine(adapters)

    result = await engine.search({**KEYWORD_REQUEST, "requested_size": 7})

    assert len(result.events) == 7


@pytest.mark.asyncio
async def test_duplicates_and_expired_events_filtered():
    """Repeated identities and stale events never reach the output."""
    raw = [
        {"id": "1", "title": "Future", "start_date": future()},
        {"id": "1", "title": "Future again"},
        {"id": "2", "title": "Stale", "start_date": past()},
        {"id": "3", "title": "Undated"},
    ]
    engine = EventSearchEngine([FakeAdapter([ok(raw)])])

    result = await engine.search(KEYWORD_REQUEST)

    assert [e.source_id for e in result.events] == ["1", "3"]
    assert result.events[0].title == "Future"
    assert result.events_fetched == 4


@pytest.mark.asyncio
async def test_every_provider_failing_raises():
    """Exhausting every strategy on every usable provider is a caller-visible failure."""
    engine = EventSearchEngine(
        [
            FakeAdapter([failed("HTTP 500")], name="alpha"),
            FakeAdapter([failed("timeout")], name="beta"),
            FakeAdapter(name="gamma", configured=False),
        ]
    )

    with pytest.raises(ProviderError) as exc_info:
        await engine.search(KEYWORD_REQUEST)
    assert "alpha: HTTP 500" in exc_info.value.message
    assert "beta: timeout" in exc_info.value.message


@pytest.mark.asyncio
async def test_partial_provider_failure_is_recovered():
    """One failing provider is reported in errors; the others still contribute."""
    engine = EventSearchEngine(
        [
            FakeAdapter([failed("HTTP 503")], name="alpha"),
            FakeAdapter([ok(records("x"))], name="beta"),
        ]
    )

    result = await engine.search(KEYWORD_REQUEST)

    assert [e.source_id for e in result.events] == ["x"]
    assert result.errors == ["alpha: HTTP 503"]
    assert result.source == "Beta"


@pytest.mark.asyncio
async def test_all_unconfigured_is_empty_not_error():
    """With no credentials anywhere the search is simply empty."""
    engine = EventSearchEngine([FakeAdapter(name="alpha", configured=False)])

    result = await engine.search(KEYWORD_REQUEST)

    assert result.events == []
    assert result.requests_made == 0


@pytest.mark.asyncio
async def test_detail_errors_surface_alongside_results():
    """Per-item failures are reported without dropping successes."""
    page = ProviderSearchResult(
        success=True,
        raw_events=records("ok"),
        total_results=2,
        requests_made=3,
        item_errors=[DetailError(item_id="broken", error="HTTP 500")],
    )
    engine = EventSearchEngine([FakeAdapter([page])])

    result = await engine.search(KEYWORD_REQUEST)

    assert [e.source_id for e in result.events] == ["ok"]
    assert any("1 item(s) failed" in err for err in result.errors)


@pytest.mark.asyncio
async def test_industry_topic_request_uses_generated_strategies():
    """The first generated keyword is reported as the query."""
    adapter = FakeAdapter([ok(records(1))], policy=FallbackPolicy.ACCUMULATE_UNTIL_FULL, page_cap=4)
    engine = EventSearchEngine([adapter])

    result = await engine.search(
        SearchRequest(industry="Technology", topic="Cloud Computing & Infrastructure", requested_size=3)
    )

    assert result.query == "cloud computing conference"
    assert adapter.calls[0][0] == "cloud computing conference"
    assert result.strategies_tried == 3


@pytest.mark.asyncio
async def test_results_written_to_sink():
    """Filtered events are handed to the sink once."""
    sink = MagicMock()
    sink.save.return_value = SaveResult(saved=2)
    engine = EventSearchEngine([FakeAdapter([ok(records("a", "b"))])], sink=sink)

    result = await engine.search(KEYWORD_REQUEST)

    sink.save.assert_called_once()
    assert [e.source_id for e in sink.save.call_args.args[0]] == ["a", "b"]
    assert result.errors == []


@pytest.mark.asyncio
async def test_sink_failure_does_not_fail_search():
    """A broken sink is logged and reported, not raised."""
    sink = MagicMock()
    sink.save.side_effect = RuntimeError("disk full")
    engine = EventSearchEngine([FakeAdapter([ok(records("a"))])], sink=sink)

    result = await engine.search(KEYWORD_REQUEST)

    assert len(result.events) == 1
    assert result.errors == ["sink: disk full"]


@pytest.mark.asyncio
async def test_preview_strategies_makes_no_provider_calls():
    """Previewing only runs the strategy generator."""
    adapter = FakeAdapter()
    engine = EventSearchEngine([adapter])

    strategies = await engine.preview_strategies({"industry": "Finance", "topic": "Leadership"})

    assert strategies[0].keyword == "leadership conference"
    assert strategies[-1].keyword == "Leadership Finance"
    assert adapter.calls == []


@pytest.mark.asyncio
async def test_out_of_range_dates_do_not_crash_search():
    """A catalogue record with an unrepresentable date is returned undated."""
    catalogue = [{"id": "edge", "EventName": "Cloud Native Day", "Date": "0001-01-01T00:00:00+05:00", "URL": "https://cnd.dev"}]
    provider = CallForDataSpeakersProvider(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=catalogue)))
    engine = EventSearchEngine([provider])

    result = await engine.search({"keyword": "cloud"})

    assert [e.source_id for e in result.events] == ["edge"]
    assert result.events[0].start_date is None


@pytest.mark.asyncio
async def test_malformed_provider_payload_is_recovered():
    """A provider returning a wrongly shaped page is an error entry, not a crash."""
    payload = {"_embedded": {"events": "not-a-list"}, "page": {"totalElements": {"n": 1}}}
    broken = TicketmasterProvider(
        api_key="valid-key-123", transport=httpx.MockTransport(lambda r: httpx.Response(200, json=payload))
    )
    engine = EventSearchEngine([broken, FakeAdapter([ok(records("x"))], name="beta")])

    result = await engine.search(KEYWORD_REQUEST)

    assert [e.source_id for e in result.events] == ["x"]
