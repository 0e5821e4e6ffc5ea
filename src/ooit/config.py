"""
Ooit Gedacht - Configuration and settings.

Settings are read from the environment and an optional .env file.
Nothing here is required to run the wizard offline; the OpenAI key is only
needed when a real image is generated.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Timing values are in milliseconds unless named otherwise.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # OpenAI (image generation)
    openai_api_key: str | None = None
    image_model: str = "gpt-image-1"
    image_size: str = "1536x1024"

    # Application
    ooit_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    # LANGUAGE alone collides with the POSIX locale variable
    language: Literal["nl", "en"] = Field("nl", validation_alias="OOIT_LANGUAGE")

    # Prompt logging
    # OOIT_LOG_PROMPTS=1 - log generation prompts to local files (dev only)
    ooit_log_prompts: bool = False

    # Session persistence
    session_dir: Path = Path(".ooit")
    session_expire_hours: int = 24  # Discard saved progress after this

    # Generation
    min_result_length: int = 100  # Shorter results are treated as failures
    progress_scale: float = 1.0  # Multiplier for cosmetic delays (0 disables)
    grace_delay_ms: int = 500

    @property
    def is_development(self) -> bool:
        return self.ooit_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: Settings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()
