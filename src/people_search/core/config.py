"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the people search system.

    Values come from ``PEOPLE_SEARCH_*`` environment variables or a local
    ``.env`` file. The OpenAI key is also picked up from the conventional
    ``OPENAI_API_KEY`` / ``OPEN_AI_API_KEY`` variables.
    """

    model_config = SettingsConfigDict(
        env_prefix="PEOPLE_SEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "PEOPLE_SEARCH_OPENAI_API_KEY", "OPENAI_API_KEY", "OPEN_AI_API_KEY"
        ),
        description="API key for the OpenAI provider",
    )
    openai_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of an OpenAI-compatible endpoint",
    )
    openai_timeout_seconds: float = Field(
        default=45.0,
        gt=0,
        description="Timeout for provider calls (seconds)",
    )
    openai_max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Maximum retries on transient provider failures",
    )
    default_temperature: float = Field(default=0.0, ge=0.0, le=2.0)

    search_top_k: int = Field(
        default=5,
        ge=1,
        le=1000,
        description="Default number of profiles returned by a search",
    )
    search_threshold: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Default minimum similarity for search results",
    )
    max_workers: int = Field(default=4, ge=1, le=64)
    log_level: str = Field(default="INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
