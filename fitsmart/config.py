"""Configuration management for FitSmart."""

from pydantic_settings import BaseSettings
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Vision provider (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    vision_model: str = "gpt-4o"
    vision_max_tokens: int = 1000
    vision_temperature: float = 0.3
    vision_image_detail: Literal["low", "high", "auto"] = "high"
    vision_timeout: float = 60.0  # seconds

    # Hydration reminders
    enable_water_reminders: bool = False
    reminder_start_hour: int = 7
    reminder_end_hour: int = 22

    # Timezone
    timezone: str = "America/Sao_Paulo"

    # API server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
