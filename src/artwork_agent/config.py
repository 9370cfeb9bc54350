"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Credentials are optional here and checked when first used.
    """

    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    openai_max_tokens: int = 500
    identification_timeout_seconds: float = 30.0
    elevenlabs_api_key: str | None = None
    elevenlabs_agent_id: str | None = None
    camera_index: int = 0
    camera_snapshot_url: str | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def debug_errors(self) -> bool:
        """Whether user-facing errors carry upstream detail."""
        return self.environment == "local"
