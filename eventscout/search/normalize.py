"""Normalization of provider records into NormalizedEvent.

Every extractor here is total: unparsable input yields None (or the
documented default) instead of raising. The classification heuristics are
best-effort keyword lookups and are allowed to misclassify; they are never
allowed to drop a record.
"""

from __future__ import annotations

import hashlib
import math
import re
from datetime import date, datetime, timezone
from typing import Any
from urllib.parse import urlparse

from eventscout.search.lexicon import (
    CATEGORY_KEYWORDS,
    CURRENCY_SYMBOLS,
    DEFAULT_CATEGORY,
    DEFAULT_EVENT_TYPE,
    EVENT_TYPE_KEYWORDS,
    FREE_KEYWORDS,
    GENERIC_EVENT_TERMS,
    ORGANIZER_TLDS,
    VIRTUAL_KEYWORDS,
)
from eventscout.search.schemas import NormalizedEvent, RawProviderRecord

UNTITLED = "Untitled Event"

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_MONTH_RE = (
    r"(Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?|"
    r"Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)

_US_DATE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_ISO_DATE = re.compile(r"\b(\d{4})-(\d{2})-(\d{2})\b")
_MONTH_FIRST = re.compile(_MONTH_RE + r"\.?\s+(\d{1,2})(?:st|nd|rd|th)?,?\s+(\d{4})\b", re.IGNORECASE)
_DAY_FIRST = re.compile(r"\b(\d{1,2})(?:st|nd|rd|th)?\s+" + _MONTH_RE + r"\.?,?\s+(\d{4})\b", re.IGNORECASE)

_AMOUNT = r"(\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?|\d+(?:\.\d{1,2})?)"
_SYMBOL_PRICE = re.compile(r"([$€£¥₹])\s?" + _AMOUNT)
_CODE_PRICE = re.compile(r"\b([A-Z]{3})\s?" + _AMOUNT)
_PRICE_CODE = re.compile(_AMOUNT + r"\s?([A-Z]{3})\b")

_LOCATION_PATTERNS = [
    re.compile(r"\b(?:in|at)\s+([A-Z][a-zA-Z]+(?:\s[A-Z][a-zA-Z]+)*,\s*[A-Z]{2})\b"),
    re.compile(r"\b([A-Z][a-zA-Z]+(?:\s[A-Z][a-zA-Z]+)*,\s*(?:[A-Z]{2}|[A-Z][a-z]+))\s*(?:\||-|·|\d)"),
]

_KNOWN_CURRENCIES = {"USD", "EUR", "GBP", "CAD", "AUD", "JPY", "INR", "CHF", "NZD", "SGD"}


def text_of(value: Any) -> str:
    """Coerce any scalar to a stripped string; containers and None become ''."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    return str(value).strip()


def safe_get(record: Any, *path: Any, default: Any = None) -> Any:
    """Walk nested dicts/lists without raising."""
    current = record
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError):
            return default
        if current is None:
            return default
    return current


def _aware(value: datetime) -> datetime | None:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError:
        # offset pushes the instant outside datetime's range
        return None


def _build_date(year: int, month: int, day: int) -> datetime | None:
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except (ValueError, OverflowError):
        return None


def find_date_in_text(text: Any) -> datetime | None:
    """Find the first recognisable date anywhere in free text."""
    s = text_of(text)
    if not s:
        return None

    candidates = []
    for pattern, builder in (
        (_ISO_DATE, lambda m: _build_date(int(m[1]), int(m[2]), int(m[3]))),
        (_US_DATE, lambda m: _build_date(int(m[3]), int(m[1]), int(m[2]))),
        (_MONTH_FIRST, lambda m: _build_date(int(m[3]), _MONTHS[m[1][:3].lower()], int(m[2]))),
        (_DAY_FIRST, lambda m: _build_date(int(m[3]), _MONTHS[m[2][:3].lower()], int(m[1]))),
    ):
        match = pattern.search(s)
        if match:
            parsed = builder(match)
            if parsed is not None:
                candidates.append((match.start(), parsed))

    if not candidates:
        return None
    return min(candidates, key=lambda c: c[0])[1]


def parse_date(value: Any) -> datetime | None:
    """
    Parse a loosely formatted date into an aware UTC datetime.

    Accepts datetime/date objects, ISO-8601 strings (with or without time,
    'Z' suffix allowed), MM/DD/YYYY, YYYY-MM-DD, 'Month D, YYYY',
    'Mon D, YYYY' and 'D Month YYYY'. Anything else returns None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    s = text_of(value)
    if not s:
        return None

    iso = s[:-1] + "+00:00" if s.endswith("Z") else s
    try:
        return _aware(datetime.fromisoformat(iso))
    except (ValueError, OverflowError):
        pass

    return find_date_in_text(s)


def parse_price(value: Any) -> tuple[float | None, str | None]:
    """Parse '$1,299.00', '€25', 'USD 40' or '40 EUR' into (amount, currency)."""
    if isinstance(value, bool):
        return None, None
    if isinstance(value, (int, float)):
        try:
            return float(value), None
        except OverflowError:
            return None, None

    s = text_of(value)
    if not s:
        return None, None

    match = _SYMBOL_PRICE.search(s)
    if match:
        return _to_amount(match[2]), CURRENCY_SYMBOLS.get(match[1])

    match = _CODE_PRICE.search(s)
    if match and match[1] in _KNOWN_CURRENCIES:
        return _to_amount(match[2]), match[1]

    match = _PRICE_CODE.search(s)
    if match and match[2] in _KNOWN_CURRENCIES:
        return _to_amount(match[1]), match[2]

    return None, None


def _to_amount(raw: str) -> float | None:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def organizer_from_url(url: Any) -> str | None:
    """Guess an organizer name from a URL's domain ('www.data-summit.org' -> 'Data Summit')."""
    s = text_of(url)
    if not s:
        return None
    if "://" not in s:
        s = f"http://{s}"
    try:
        host = (urlparse(s).hostname or "").lower()
    except ValueError:
        return None
    if host.startswith("www."):
        host = host[4:]
    for tld in ORGANIZER_TLDS:
        if host.endswith(f".{tld}"):
            host = host[: -(len(tld) + 1)]
            break
    parts = [p for p in host.split(".") if p]
    if not parts:
        return None
    return " ".join(p.replace("-", " ").title() for p in parts)


def extract_location(text: Any) -> str | None:
    """Pull a 'City, ST' style location out of free text."""
    s = text_of(text)
    if not s:
        return None
    for pattern in _LOCATION_PATTERNS:
        match = pattern.search(s)
        if match:
            return match[1].strip()
    return None


def urgency_level(deadline: datetime | None, now: datetime | None = None) -> str | None:
    """Classify a submission deadline: expired, urgent (<=7 days), soon (<=30 days) or normal."""
    if deadline is None:
        return None
    now = now or datetime.now(timezone.utc)
    days = math.ceil((deadline - now).total_seconds() / 86400)
    if days < 0:
        return "expired"
    if days <= 7:
        return "urgent"
    if days <= 30:
        return "soon"
    return "normal"


def _has_term(haystack: str, term: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", haystack) is not None


def detect_category(text: Any) -> str:
    haystack = text_of(text).lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(_has_term(haystack, k) for k in keywords):
            return category
    return DEFAULT_CATEGORY


def detect_event_type(text: Any) -> str:
    haystack = text_of(text).lower()
    for keyword, label in EVENT_TYPE_KEYWORDS:
        if _has_term(haystack, keyword):
            return label
    return DEFAULT_EVENT_TYPE


def detect_virtual(text: Any) -> bool:
    haystack = text_of(text).lower()
    return any(_has_term(haystack, k) for k in VIRTUAL_KEYWORDS)


def detect_free(text: Any) -> bool:
    haystack = text_of(text).lower()
    return any(_has_term(haystack, k) for k in FREE_KEYWORDS)


def keyword_matches(keyword: str, *texts: Any) -> bool:
    """
    Client-side keyword filter for providers that return whole catalogues.

    Every subject term of the keyword must appear (word-boundary,
    case-insensitive) somewhere in the texts. Gathering words such as
    'conference' or 'summit' are ignored; a keyword made only of those
    matches everything.
    """
    terms = [t for t in re.findall(r"\w[\w+#-]*", keyword.lower()) if t not in GENERIC_EVENT_TERMS]
    if not terms:
        return True
    haystack = " ".join(text_of(t) for t in texts).lower()
    return all(_has_term(haystack, term) for term in terms)


def stable_id(*candidates: Any) -> str:
    """Derive a deterministic id from the first non-empty candidate."""
    for candidate in candidates:
        s = text_of(candidate)
        if s:
            return hashlib.sha1(s.encode("utf-8")).hexdigest()[:16]
    return "unknown"


def build_event(
    source_provider: str,
    *,
    title: Any = None,
    description: Any = None,
    url: Any = None,
    source_id: Any = None,
    start_date: Any = None,
    end_date: Any = None,
    deadline: Any = None,
    location: Any = None,
    venue: Any = None,
    price: Any = None,
    currency: Any = None,
    image_url: Any = None,
    organizer: Any = None,
    category: Any = None,
    event_type: Any = None,
    is_virtual: bool | None = None,
    is_free: bool | None = None,
) -> NormalizedEvent:
    """Assemble a NormalizedEvent from explicit fields, filling gaps heuristically."""
    title_s = text_of(title) or UNTITLED
    description_s = text_of(description)
    url_s = text_of(url)
    combined = f"{title_s} {description_s}"

    amount, parsed_currency = parse_price(price)
    currency_s = text_of(currency) or parsed_currency
    if is_free is None:
        is_free = amount == 0 if amount is not None else detect_free(combined)
    if is_virtual is None:
        is_virtual = detect_virtual(combined)

    deadline_dt = parse_date(deadline)

    return NormalizedEvent(
        title=title_s,
        description=description_s,
        start_date=parse_date(start_date),
        end_date=parse_date(end_date),
        deadline=deadline_dt,
        location=text_of(location) or None,
        venue=text_of(venue) or None,
        price=amount,
        currency=currency_s,
        is_free=bool(is_free),
        is_virtual=bool(is_virtual),
        url=url_s,
        image_url=text_of(image_url) or None,
        organizer=text_of(organizer) or organizer_from_url(url_s),
        category=text_of(category) or detect_category(combined),
        event_type=text_of(event_type) or detect_event_type(combined),
        urgency=urgency_level(deadline_dt),
        source_provider=source_provider,
        source_id=text_of(source_id) or stable_id(url_s, title_s),
    )


def normalize(raw: RawProviderRecord, source_provider: str) -> NormalizedEvent:
    """Map a loosely shaped record onto NormalizedEvent using common field names."""
    if not isinstance(raw, dict):
        raw = {"title": text_of(raw)}

    def first(*keys: str) -> Any:
        for key in keys:
            value = raw.get(key)
            if value not in (None, "", [], {}):
                return value
        return None

    return build_event(
        source_provider,
        title=first("title", "name", "EventName"),
        description=first("description", "snippet", "info", "Information"),
        url=first("url", "link", "URL", "website"),
        source_id=first("id", "source_id", "sourceId", "event_id"),
        start_date=first("start_date", "startDate", "date", "Date", "event_date"),
        end_date=first("end_date", "endDate", "EndDate"),
        deadline=first("deadline", "Cfs_Closes", "submission_deadline"),
        location=first("location", "Venue"),
        venue=first("venue") if isinstance(raw.get("venue"), str) else None,
        price=first("price"),
        currency=first("currency"),
        image_url=first("image_url", "imageUrl", "thumbnail", "image"),
        organizer=first("organizer", "organization"),
        category=first("category"),
        event_type=first("event_type", "eventType", "type", "EventType"),
    )


def bare_event(raw: Any, source_provider: str) -> NormalizedEvent:
    """Last-resort mapping that reads only title, link and id as text."""
    record = raw if isinstance(raw, dict) else {}
    title = text_of(record.get("title") or record.get("name") or record.get("EventName")) or UNTITLED
    url = text_of(record.get("url") or record.get("link") or record.get("URL"))
    return NormalizedEvent(
        title=title,
        url=url,
        source_provider=source_provider,
        source_id=text_of(record.get("id") or record.get("event_id")) or stable_id(url, title),
    )


def as_records(value: Any) -> list[dict]:
    """Keep only the dict entries of a payload list; anything else yields []."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def as_count(value: Any, default: int = 0) -> int:
    """Coerce a payload counter ('12', 12.0, 12) to a non-negative int."""
    if isinstance(value, bool):
        return default
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return max(0, count)
