"""Application settings via environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings via environment variables."""

    # Anthropic Direct API
    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"

    # Relay
    relay_model: str = "claude-3-5-sonnet-20241022"
    relay_max_tokens: int = Field(default=1024, gt=0)
    relay_timeout_seconds: float = Field(default=25.0, gt=0)
    relay_max_retries: int = Field(default=2, ge=0)
    relay_backoff_base: float = Field(default=2.0, gt=0)

    # Logging
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
