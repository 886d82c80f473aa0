"""Shared fixtures."""

from datetime import datetime, timezone

import pytest

from eventscout.search.schemas import NormalizedEvent, SearchStrategy


@pytest.fixture
def strategies():
    """Three distinct strategies in priority order."""
    return [
        SearchStrategy(keyword="cloud computing conference", priority=1),
        SearchStrategy(keyword="infrastructure summit", priority=2),
        SearchStrategy(keyword="devops days", priority=3),
    ]


@pytest.fixture
def now():
    return datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_event():
    """Factory for NormalizedEvent with sensible defaults."""

    def _make(source_id="1", provider="fake", **fields):
        fields.setdefault("title", f"Event {source_id}")
        return NormalizedEvent(source_provider=provider, source_id=source_id, **fields)

    return _make
