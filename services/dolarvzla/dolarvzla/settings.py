"""Application settings for the dolarvzla rates service."""
from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or .env."""

    # App identity & logging
    APP_NAME: str = "dolarvzla"
    LOG_LEVEL: str = "INFO"

    # Networking (FastAPI/uvicorn)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # LLM provider. Without a key the AI fallback and the assistant are disabled.
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4.1"
    OPENAI_WEB_SEARCH_TOOL: str = "web_search"
    OPENAI_TIMEOUT_SEC: float = 30.0
    AI_STRUCTURED_OUTPUT: bool = True

    # Upstream rate providers
    HTTP_TIMEOUT_SEC: float = 8.0
    DOLARVZLA_URL: str = "https://api.dolarvzla.com/public/exchange-rate"
    DOLARAPI_BASE_URL: str = "https://ve.dolarapi.com/v1"
    YADIO_URL: str = "https://api.yadio.io/rate/USD/VES"

    # Yadio rates below this value are read as USD per 1 VES and inverted
    USDT_INVERT_BELOW: float = 1.0

    # Snapshot refresh loop
    REFRESH_INTERVAL_SEC: int = 300
    AUTO_REFRESH: bool = True

    # CORS (CSV list, e.g. "https://app.example.com,https://foo.bar")
    CORS_ALLOW_ORIGINS: Optional[str] = None
    CORS_ALLOW_ORIGIN_REGEX: Optional[str] = None
    CORS_ALLOW_CREDENTIALS: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def has_ai_credential(self) -> bool:
        return bool((self.OPENAI_API_KEY or "").strip())

    def cors_origin_list(self) -> Optional[List[str]]:
        if not self.CORS_ALLOW_ORIGINS:
            return None
        return [s.strip() for s in str(self.CORS_ALLOW_ORIGINS).split(",") if s.strip()]

    def validate_refresh(self) -> None:
        if self.REFRESH_INTERVAL_SEC <= 0:
            raise ValueError("REFRESH_INTERVAL_SEC must be positive")
        if self.USDT_INVERT_BELOW < 0:
            raise ValueError("USDT_INVERT_BELOW cannot be negative")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = Settings()
    settings.validate_refresh()
    return settings


settings = get_settings()
