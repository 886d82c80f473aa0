"""SQLite sink for normalized events."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable

from eventscout.search.schemas import NormalizedEvent, SaveResult

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS events (
    source_provider TEXT NOT NULL,
    source_id TEXT NOT NULL,
    title TEXT NOT NULL,
    url TEXT,
    start_date TEXT,
    deadline TEXT,
    location TEXT,
    category TEXT,
    event_type TEXT,
    payload TEXT NOT NULL,   -- full NormalizedEvent as JSON
    scraped_at TEXT NOT NULL,
    PRIMARY KEY (source_provider, source_id)
);
"""


class EventStore:
    """Persists events keyed by (source_provider, source_id); saving the same event twice replaces it."""

    def __init__(self, db_path: str = "data/events.db"):
        self.db_path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        with self._conn() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _conn(self):
        conn = sqlite3.connect(self.db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def save(self, events: Iterable[NormalizedEvent]) -> SaveResult:
        """Upsert a batch. A failing row is recorded in ``errors`` and does not abort the rest."""
        result = SaveResult()
        with self._conn() as conn:
            for event in events:
                try:
                    conn.execute(
                        """
                        INSERT OR REPLACE INTO events
                            (source_provider, source_id, title, url, start_date, deadline,
                             location, category, event_type, payload, scraped_at)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        (
                            event.source_provider,
                            event.source_id,
                            event.title,
                            event.url,
                            event.start_date.isoformat() if event.start_date else None,
                            event.deadline.isoformat() if event.deadline else None,
                            event.location,
                            event.category,
                            event.event_type,
                            event.model_dump_json(),
                            event.scraped_at.isoformat(),
                        ),
                    )
                    result.saved += 1
                except (sqlite3.Error, ValueError, AttributeError) as e:
                    ident = getattr(event, "identity", None)
                    logger.warning(f"Failed to save event {ident}: {e}")
                    result.errors.append(f"{ident}: {e}")
        return result

    def count(self) -> int:
        with self._conn() as conn:
            return conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]

    def get(self, source_provider: str, source_id: str) -> NormalizedEvent | None:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT payload FROM events WHERE source_provider = ? AND source_id = ?",
                (source_provider, source_id),
            ).fetchone()
        if row is None:
            return None
        return NormalizedEvent.model_validate_json(row["payload"])
