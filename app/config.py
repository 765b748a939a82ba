"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Readive API"
    app_version: str = "2.0.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Generative model
    ai_model: str = "gemini-2.0-flash"  # Key into MODEL_REGISTRY
    ai_temperature: float = 0.4
    ai_max_tokens: int = 2048
    google_api_key: str | None = None  # Gemini API key
    openai_api_key: str | None = None

    # Book catalog (Google Books volumes API)
    google_books_api_key: str | None = None  # Optional, raises the anonymous quota
    books_api_base_url: str = "https://www.googleapis.com/books/v1"
    catalog_max_results: int = 25
    catalog_timeout_seconds: float | None = None  # None waits indefinitely

    # Search qualifiers
    recent_year_range: str = "2020..2026"
    classic_cutoff_year: int = 2010

    # Prompt/schema version (see app.ai.prompts.PROMPT_VERSIONS)
    prompt_version: str = "v3"

    # CORS
    cors_origins: list[str] = ["*"]

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
