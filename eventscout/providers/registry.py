"""Build provider adapters from application settings."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List

import httpx

from eventscout.config import Settings
from eventscout.exceptions import ConfigurationError
from eventscout.providers.base import ProviderAdapter
from eventscout.providers.callfordataspeakers import CallForDataSpeakersProvider
from eventscout.providers.openwebninja import OpenWebNinjaProvider
from eventscout.providers.pretalx import PretalxProvider
from eventscout.providers.serpapi import SerpApiProvider
from eventscout.providers.ticketmaster import TicketmasterProvider

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[Settings, httpx.AsyncBaseTransport | None], ProviderAdapter]


def _ticketmaster(settings: Settings, transport: httpx.AsyncBaseTransport | None) -> ProviderAdapter:
    return TicketmasterProvider(
        api_key=settings.ticketmaster_api_key,
        base_url=settings.ticketmaster_base_url,
        timeout=settings.ticketmaster_timeout,
        page_delay=settings.ticketmaster_page_delay,
        transport=transport,
    )


def _serpapi(settings: Settings, transport: httpx.AsyncBaseTransport | None) -> ProviderAdapter:
    return SerpApiProvider(
        api_key=settings.serpapi_api_key,
        base_url=settings.serpapi_base_url,
        timeout=settings.serpapi_timeout,
        default_location=settings.serpapi_location,
        max_pages=settings.serpapi_max_pages,
        page_delay=settings.serpapi_page_delay,
        transport=transport,
    )


def _callfordataspeakers(settings: Settings, transport: httpx.AsyncBaseTransport | None) -> ProviderAdapter:
    return CallForDataSpeakersProvider(
        base_url=settings.callfordataspeakers_base_url,
        timeout=settings.callfordataspeakers_timeout,
        transport=transport,
    )


def _pretalx(settings: Settings, transport: httpx.AsyncBaseTransport | None) -> ProviderAdapter:
    return PretalxProvider(
        base_url=settings.pretalx_base_url,
        timeout=settings.pretalx_timeout,
        window_size=settings.detail_window_size,
        window_delay=settings.detail_window_delay,
        transport=transport,
    )


def _openwebninja(settings: Settings, transport: httpx.AsyncBaseTransport | None) -> ProviderAdapter:
    return OpenWebNinjaProvider(
        api_key=settings.openwebninja_api_key,
        base_url=settings.openwebninja_base_url,
        timeout=settings.openwebninja_timeout,
        transport=transport,
    )


PROVIDER_FACTORIES: Dict[str, ProviderFactory] = {
    "ticketmaster": _ticketmaster,
    "serpapi": _serpapi,
    "callfordataspeakers": _callfordataspeakers,
    "pretalx": _pretalx,
    "openwebninja": _openwebninja,
}


def build_providers(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> List[ProviderAdapter]:
    """
    Instantiate the enabled providers in configured order.

    Raises:
        ConfigurationError: If an enabled provider name is unknown
    """
    providers = []
    for name in settings.enabled_providers:
        key = name.strip().lower()
        factory = PROVIDER_FACTORIES.get(key)
        if factory is None:
            raise ConfigurationError(
                f"Unknown provider '{name}'. Available: {', '.join(PROVIDER_FACTORIES)}"
            )
        provider = factory(settings, transport)
        if not provider.is_configured:
            logger.info(f"{provider.display_name} has no credentials; it will return empty results")
        providers.append(provider)
    return providers
