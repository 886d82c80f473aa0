"""Post-merge filters: expiry and de-duplication."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from eventscout.search.schemas import NormalizedEvent

logger = logging.getLogger(__name__)

EXPIRY_GRACE = timedelta(hours=24)


def best_known_date(event: NormalizedEvent) -> datetime | None:
    """Explicit start date, else the submission deadline, else None."""
    return event.start_date or event.deadline


def is_expired(event: NormalizedEvent, now: datetime | None = None) -> bool:
    known = best_known_date(event)
    if known is None:
        return False
    now = now or datetime.now(timezone.utc)
    return known < now - EXPIRY_GRACE


def drop_expired(events: Iterable[NormalizedEvent], now: datetime | None = None) -> List[NormalizedEvent]:
    """Remove events dated more than 24h in the past; undated events are kept."""
    now = now or datetime.now(timezone.utc)
    events = list(events)
    kept = [e for e in events if not is_expired(e, now)]
    if len(kept) != len(events):
        logger.info(f"Filtered out {len(events) - len(kept)} expired events")
    return kept


def dedupe(events: Iterable[NormalizedEvent]) -> List[NormalizedEvent]:
    """Keep the first occurrence of each (source_provider, source_id) pair, preserving order."""
    seen = set()
    unique = []
    for event in events:
        if event.identity in seen:
            continue
        seen.add(event.identity)
        unique.append(event)
    return unique
