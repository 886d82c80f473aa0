"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    app_title: str = Field(default="EventScout", description="Application title")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    log_json: bool = Field(default=True, description="Use JSON log format")
    log_file: str | None = Field(default=None, description="Optional log file path")

    # Search optimizer (OpenAI)
    openai_api_key: str = Field(default="", description="OpenAI API key; empty disables the optimizer")
    openai_model: str = Field(default="gpt-3.5-turbo", description="Chat model used for keyword optimization")
    openai_timeout: float = Field(default=10.0, description="Optimizer request timeout in seconds")

    # Ticketmaster Discovery API
    ticketmaster_api_key: str = Field(default="", description="Ticketmaster Discovery API key")
    ticketmaster_base_url: str = Field(
        default="https://app.ticketmaster.com/discovery/v2", description="Base URL for Ticketmaster API"
    )
    ticketmaster_timeout: float = Field(default=10.0, description="HTTP request timeout in seconds")
    ticketmaster_page_delay: float = Field(default=0.1, description="Delay between paginated requests in seconds")

    # SerpAPI (Google web search)
    serpapi_api_key: str = Field(default="", description="SerpAPI key")
    serpapi_base_url: str = Field(default="https://serpapi.com/search", description="SerpAPI search endpoint")
    serpapi_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")
    serpapi_page_delay: float = Field(default=1.0, description="Delay between paginated requests in seconds")
    serpapi_max_pages: int = Field(default=5, description="Maximum result pages fetched per strategy")
    serpapi_location: str = Field(default="United States", description="Default SerpAPI location")

    # Call for Data Speakers (no key required)
    callfordataspeakers_base_url: str = Field(
        default="https://callfordataspeakers.com/api/events", description="Call for Data Speakers events endpoint"
    )
    callfordataspeakers_timeout: float = Field(default=30.0, description="HTTP request timeout in seconds")

    # Pretalx (ID enumeration + per-event detail)
    pretalx_base_url: str = Field(default="https://pretalx.com", description="Pretalx instance base URL")
    pretalx_timeout: float = Field(default=10.0, description="HTTP request timeout in seconds")

    # OpenWebNinja real-time events
    openwebninja_api_key: str = Field(default="", description="OpenWebNinja API key")
    openwebninja_base_url: str = Field(
        default="https://api.openwebninja.com/realtime-events-data", description="OpenWebNinja API base URL"
    )
    openwebninja_timeout: float = Field(default=10.0, description="HTTP request timeout in seconds")

    # Orchestration
    enabled_providers: list[str] = Field(
        default=["ticketmaster", "serpapi", "callfordataspeakers", "pretalx", "openwebninja"],
        description="Providers queried per search, in order",
    )
    accumulate_strategy_limit: int = Field(
        default=3, description="Strategies tried by accumulate-until-full providers"
    )
    detail_window_size: int = Field(default=5, description="Concurrent detail fetches per window")
    detail_window_delay: float = Field(default=0.2, description="Delay between detail fetch windows in seconds")

    # Persistence sink
    event_db_path: str | None = Field(
        default=None, description="SQLite path for persisting search results; empty disables the sink"
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
