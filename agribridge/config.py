"""
Service configuration.

Every setting can be overridden by an environment variable of the same
name (upper case) or a .env file in the working directory.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """AgriBridge localization service settings."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # AI / LLM
    # ==========================================================================

    # Primary: Groq-hosted Llama
    groq_api_key: str = ""
    groq_model: str = "llama-3.3-70b-versatile"

    # Fallback providers
    google_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"

    # Which provider to use
    llm_provider: str = "groq"

    # ==========================================================================
    # Translation
    # ==========================================================================

    ai_translation_enabled: bool = True
    translation_cache_ttl_days: int = 30
    translation_timeout_seconds: float = 30.0
    translation_max_concurrency: int = 8

    # Optional YAML file overriding the built-in glossary
    glossary_path: str = ""

    # Values starting with one of these are never localized
    cdn_url_prefixes: str = "https://res.cloudinary.com/"

    # ==========================================================================
    # Optional Services
    # ==========================================================================

    redis_url: str = ""
    sentry_dsn: str = ""

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def cdn_url_prefix_list(self) -> list[str]:
        return [p.strip() for p in self.cdn_url_prefixes.split(",") if p.strip()]

    @property
    def translation_cache_ttl_seconds(self) -> int:
        return self.translation_cache_ttl_days * 24 * 60 * 60

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()
