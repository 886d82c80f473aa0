"""FastAPI dependencies."""

from eventscout.config import get_settings
from eventscout.providers.registry import build_providers
from eventscout.search.engine import EventSearchEngine
from eventscout.search.fallback import FallbackController
from eventscout.search.optimizer import OpenAIOptimizer
from eventscout.search.strategies import StrategyGenerator
from eventscout.store import EventStore


def get_engine() -> EventSearchEngine:
    """Get a search engine wired from settings via dependency injection."""
    settings = get_settings()
    optimizer = None
    if settings.openai_api_key:
        optimizer = OpenAIOptimizer(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.openai_timeout,
        )
    sink = EventStore(settings.event_db_path) if settings.event_db_path else None
    return EventSearchEngine(
        providers=build_providers(settings),
        generator=StrategyGenerator(optimizer),
        controller=FallbackController(accumulate_limit=settings.accumulate_strategy_limit),
        sink=sink,
    )
