"""Tests for the SQLite event store."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from eventscout.store import EventStore


@pytest.fixture
def store(tmp_path):
    return EventStore(str(tmp_path / "events.db"))


def test_save_and_get(store, make_event):
    """Saved events round-trip through the payload column."""
    event = make_event("42", provider="ticketmaster", start_date=datetime(2030, 5, 1, tzinfo=timezone.utc), price=99.0)

    result = store.save([event])

    assert result.saved == 1
    assert result.errors == []
    loaded = store.get("ticketmaster", "42")
    assert loaded == event


def test_save_is_idempotent_on_identity(store, make_event):
    """Saving the same identity again replaces the row."""
    store.save([make_event("1", title="first"), make_event("2")])
    store.save([make_event("1", title="updated")])

    assert store.count() == 2
    assert store.get("fake", "1").title == "updated"


def test_get_missing_returns_none(store):
    assert store.get("fake", "nope") is None


def test_bad_row_does_not_abort_batch(store, make_event):
    """A row that cannot be written is reported and the rest are saved."""
    broken = MagicMock()

    result = store.save([make_event("1"), broken, make_event("2")])

    assert result.saved == 2
    assert len(result.errors) == 1
    assert store.count() == 2
