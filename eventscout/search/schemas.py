"""Pydantic schemas for the event search engine."""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from eventscout.exceptions import ValidationError

MIN_REQUESTED_SIZE = 1
MAX_REQUESTED_SIZE = 1000

RawProviderRecord = Dict[str, Any]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SearchLocation(BaseModel):
    """Where to search; adapters map this onto their own location parameters."""

    city: Optional[str] = None
    country_code: Optional[str] = None

    @property
    def label(self) -> str:
        if self.city and self.country_code:
            return f"{self.city}, {self.country_code}"
        return self.city or self.country_code or ""


class SearchRequest(BaseModel):
    """One event search, by industry + topic or by free-text keyword."""

    industry: Optional[str] = Field(None, description="Industry selection (e.g. 'Technology')")
    topic: Optional[str] = Field(None, description="Speaking topic (e.g. 'Cloud Computing & Infrastructure')")
    keyword: Optional[str] = Field(None, description="Free-text keyword, used when industry/topic are absent")
    city: Optional[str] = Field(None, description="City filter")
    country_code: str = Field(default="US", description="ISO country code filter")
    requested_size: int = Field(
        default=20, ge=MIN_REQUESTED_SIZE, le=MAX_REQUESTED_SIZE, description="Maximum events to return"
    )
    page: int = Field(default=0, ge=0, description="Zero-based start page")

    @field_validator("industry", "topic", "keyword", "city", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @model_validator(mode="after")
    def _require_query_material(self) -> "SearchRequest":
        if not (self.industry and self.topic) and not self.keyword:
            raise ValueError("Provide both industry and topic, or a keyword")
        return self

    @property
    def has_industry_topic(self) -> bool:
        return bool(self.industry and self.topic)

    @property
    def location(self) -> "SearchLocation":
        return SearchLocation(city=self.city, country_code=self.country_code)


def build_search_request(payload: Dict[str, Any]) -> SearchRequest:
    """Validate a raw payload into a SearchRequest, raising our ValidationError."""
    try:
        return SearchRequest.model_validate(payload)
    except PydanticValidationError as e:
        messages = "; ".join(err.get("msg", "invalid value") for err in e.errors())
        raise ValidationError(f"Invalid search request: {messages}") from e


class SearchStrategy(BaseModel):
    """One candidate keyword/classification pair to query a provider with."""

    keyword: str
    classification_name: Optional[str] = None
    classification_id: Optional[str] = None
    event_types: List[str] = Field(default_factory=list)
    priority: int = Field(default=1, ge=1, description="1 = highest")


class OptimizationSuggestion(BaseModel):
    """Structured keyword suggestion from the optimizer or the rule tables."""

    primary_keyword: str
    alternate_keywords: List[str] = Field(default_factory=list)
    classification_id: Optional[str] = None
    classification_name: Optional[str] = None
    event_types: List[str] = Field(default_factory=list)
    audience_keywords: List[str] = Field(default_factory=list)
    reasoning: str = ""
    source: Literal["AI", "rules"] = "rules"


class DetailError(BaseModel):
    """A single failed per-item detail fetch."""

    item_id: str
    error: str


class DetailFetchResult(BaseModel):
    """Outcome of a windowed detail fetch: successes plus a separate error list."""

    items: List[Any] = Field(default_factory=list)
    errors: List[DetailError] = Field(default_factory=list)
    total_ids: int = 0

    @property
    def successful(self) -> int:
        return len(self.items)

    @property
    def failed(self) -> int:
        return len(self.errors)


class ProviderSearchResult(BaseModel):
    """Result of one adapter call (single page or aggregated pages)."""

    success: bool
    raw_events: List[RawProviderRecord] = Field(default_factory=list)
    total_results: int = 0
    total_pages: int = 0
    current_page: int = 0
    page_size: int = 0
    error: Optional[str] = None
    requests_made: int = 0
    item_errors: List[DetailError] = Field(default_factory=list)
    listed_count: Optional[int] = Field(
        None, description="Items the provider listed for this page, counting ones whose detail fetch failed"
    )


class NormalizedEvent(BaseModel):
    """Canonical event, independent of the provider it came from."""

    title: str
    description: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    deadline: Optional[datetime] = None
    location: Optional[str] = None
    venue: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    is_free: bool = False
    is_virtual: bool = False
    url: str = ""
    image_url: Optional[str] = None
    organizer: Optional[str] = None
    category: Optional[str] = None
    event_type: Optional[str] = None
    urgency: Optional[str] = Field(None, description="Deadline urgency: urgent, soon, normal or expired")
    source_provider: str
    source_id: str
    scraped_at: datetime = Field(default_factory=_utcnow)

    @property
    def identity(self) -> tuple[str, str]:
        return (self.source_provider, self.source_id)


class FallbackOutcome(BaseModel):
    """What one provider contributed after running its fallback policy."""

    provider: str
    success: bool
    events: List[NormalizedEvent] = Field(default_factory=list)
    total_results: int = 0
    total_pages: int = 0
    page_size: int = 0
    requests_made: int = 0
    strategies_tried: int = 0
    error: Optional[str] = None
    item_errors: List[DetailError] = Field(default_factory=list)
    configured: bool = True


class AggregatedResult(BaseModel):
    """Final search response returned to the caller."""

    events: List[NormalizedEvent] = Field(default_factory=list)
    total_results: int = 0
    total_pages: int = 0
    current_page: int = 0
    page_size: int = 0
    requests_made: int = 0
    events_fetched: int = 0
    max_requested: int = 0
    query: str = ""
    location: str = ""
    source: str = ""
    strategies_tried: int = 0
    errors: List[str] = Field(default_factory=list, description="Recovered per-provider failures")


class SaveResult(BaseModel):
    """Outcome of writing a batch of events to the persistence sink."""

    saved: int = 0
    errors: List[str] = Field(default_factory=list)
