"""Application settings and configuration management."""
from __future__ import annotations

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/interview.db")
    APP_CONFIG_PATH: str = Field(default="app_config.json")

    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-1.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    LLM_TIMEOUT_S: float = 30.0
    LLM_MAX_RETRIES: int = 1

    DEFAULT_TOTAL_QUESTIONS: int = 10
    DEFAULT_TIME_LIMIT_MINUTES: int = 30
    RESUME_MAX_CHARS: int = 8000
    HISTORY_LIMIT: int = 50
    FINISHED_SESSIONS_RETAINED: int = Field(default=20, ge=0)

    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
