"""
Configuration management for the job search service.
"""

from datetime import timedelta

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Job search provider (JSearch on RapidAPI)
    rapidapi_key: str = ""
    rapidapi_key_name: str = "primary"  # label stored with results, never the key
    rapidapi_host: str = "jsearch.p.rapidapi.com"
    jsearch_url: str = "https://jsearch.p.rapidapi.com/search"
    date_posted: str = "week"
    default_query: str = "software engineer"
    max_results: int = 25
    search_timeout: float = 30.0

    # Database
    database_url: str = "sqlite:///./job_search_cache.db"

    # Cache settings
    cache_ttl_hours: float = 6.0
    global_retention: int = 10
    rate_limit_cooldown_minutes: float = 60.0

    # API
    cors_origins: str = "http://localhost:5173"
    search_rate_limit: str = "30/minute"
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars

    @property
    def cache_ttl(self) -> timedelta:
        return timedelta(hours=self.cache_ttl_hours)

    @property
    def rate_limit_cooldown(self) -> timedelta:
        return timedelta(minutes=self.rate_limit_cooldown_minutes)


settings = Settings()
