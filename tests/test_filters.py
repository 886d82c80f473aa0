"""Tests for expiry and de-duplication filters."""

from datetime import timedelta

from eventscout.search.filters import dedupe, drop_expired, is_expired


def test_events_older_than_grace_period_are_dropped(make_event, now):
    """Start dates more than 24h in the past are expired; within 24h are kept."""
    old = make_event("old", start_date=now - timedelta(days=2))
    recent = make_event("recent", start_date=now - timedelta(hours=12))
    upcoming = make_event("upcoming", start_date=now + timedelta(days=10))

    kept = drop_expired([old, recent, upcoming], now=now)

    assert [e.source_id for e in kept] == ["recent", "upcoming"]


def test_undated_events_are_retained(make_event, now):
    """No date at all cannot be proven expired."""
    assert not is_expired(make_event("undated"), now)


def test_deadline_used_when_start_missing(make_event, now):
    """A past CFP deadline expires an event without a start date."""
    closed = make_event("closed", deadline=now - timedelta(days=3))
    open_ = make_event("open", deadline=now + timedelta(days=3))

    assert is_expired(closed, now)
    assert not is_expired(open_, now)


def test_start_date_takes_precedence_over_deadline(make_event, now):
    """A future start date keeps the event even if the deadline has passed."""
    event = make_event("e", start_date=now + timedelta(days=30), deadline=now - timedelta(days=10))
    assert not is_expired(event, now)


def test_dedupe_keeps_first_occurrence(make_event):
    """Later records with the same identity are dropped; order is preserved."""
    events = [
        make_event("1", title="first"),
        make_event("2"),
        make_event("1", title="second"),
        make_event("1", provider="other", title="different provider"),
    ]

    unique = dedupe(events)

    assert [(e.source_provider, e.source_id) for e in unique] == [("fake", "1"), ("fake", "2"), ("other", "1")]
    assert unique[0].title == "first"
