"""Application settings using Pydantic."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Oracle credential. Missing key is not an error until a gateway call.
    gemini_api_key: str | None = None

    # LLM Configuration
    llm_provider: str = "gemini"
    llm_model_name: str = "gemini-2.5-flash"
    llm_ollama_base_url: str = "http://localhost:11434"
    llm_temperature: float = 0.0
    llm_request_timeout: float = Field(default=60.0, gt=0)

    # Retrieve phase (pure timer)
    retrieve_step: int = Field(default=4, ge=1, le=100)
    retrieve_tick_seconds: float = Field(default=0.04, ge=0)

    # Audit phase (gated on the analysis call)
    audit_step: int = Field(default=2, ge=1, le=100)
    audit_tick_seconds: float = Field(default=0.06, ge=0)
    audit_ceiling: int = Field(default=90, ge=1, le=99)

    # Transition delays
    phase_settle_seconds: float = Field(default=0.5, ge=0)
    verdict_reveal_seconds: float = Field(default=0.2, ge=0)
    verdict_hold_seconds: float = Field(default=2.5, ge=0)

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
