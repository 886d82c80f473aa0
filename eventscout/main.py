"""FastAPI application for event search."""

import logging
from typing import Annotated, Any, Dict, List

from fastapi import Body, Depends, FastAPI, HTTPException, Query

from eventscout.config import get_settings
from eventscout.dependencies import get_engine
from eventscout.exceptions import ConfigurationError, ProviderError, ValidationError
from eventscout.middleware.request_logging import RequestLoggingMiddleware
from eventscout.providers.registry import build_providers
from eventscout.search.engine import EventSearchEngine
from eventscout.search.schemas import AggregatedResult, SearchStrategy
from eventscout.utils.logging import setup_logging

settings = get_settings()
setup_logging(level=settings.log_level, json_format=settings.log_json, log_file=settings.log_file)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="Speaking-opportunity search across event providers",
)
app.add_middleware(RequestLoggingMiddleware)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    try:
        providers = {p.name: p.is_configured for p in build_providers(settings)}
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return {"status": "degraded", "service": "eventscout", "version": settings.app_version, "error": str(e)}
    return {
        "status": "ok",
        "service": "eventscout",
        "version": settings.app_version,
        "providers": providers,
        "optimizer_configured": bool(settings.openai_api_key),
    }


@app.post("/api/events/search", response_model=AggregatedResult)
async def search_events(
    payload: Annotated[Dict[str, Any], Body(description="Search request")],
    engine: EventSearchEngine = Depends(get_engine),
):
    """Search all enabled providers and return merged, de-duplicated events."""
    try:
        return await engine.search(payload)
    except ValidationError as e:
        logger.info(f"Rejected search request: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ProviderError as e:
        logger.error(f"Search failed: {e}")
        raise HTTPException(status_code=502, detail=f"All providers failed: {e.message}") from e


@app.get("/api/events/strategies", response_model=List[SearchStrategy])
async def preview_strategies(
    industry: Annotated[str | None, Query(description="Industry selection")] = None,
    topic: Annotated[str | None, Query(description="Speaking topic")] = None,
    keyword: Annotated[str | None, Query(description="Free-text keyword")] = None,
    engine: EventSearchEngine = Depends(get_engine),
):
    """Show the search strategies a request would use, without querying providers."""
    try:
        return await engine.preview_strategies({"industry": industry, "topic": topic, "keyword": keyword})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
