"""Workflow engine settings.

Values come from the process environment, then from a ``.env`` file in
the working directory. Names are case-sensitive and unknown variables are
ignored.
"""

from functools import lru_cache
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_DEFAULT_ORIGINS = ["http://localhost:3000"]


class Settings(BaseSettings):
    """Environment-driven configuration for the API, the engine and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # -- Service ---------------------------------------------------------
    PROJECT_NAME: str = "AI Office Workflow Engine"
    DEBUG: bool = False
    API_V1_PREFIX: str = "/api/v1"
    # Comma-separated in the environment
    ALLOWED_ORIGINS: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(_DEFAULT_ORIGINS)
    )

    # -- Database --------------------------------------------------------
    # Any SQLAlchemy async URL, e.g. postgresql+asyncpg://... or sqlite+aiosqlite://...
    DATABASE_URL: str | None = None
    DATABASE_POOL_SIZE: int = Field(default=20, ge=1)
    DATABASE_MAX_OVERFLOW: int = Field(default=30, ge=0)

    # -- Text generation gateway (OpenAI-compatible chat completions) -----
    AI_GATEWAY_URL: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    AI_GATEWAY_API_KEY: str | None = None
    AI_MODEL: str = "google/gemini-2.5-flash"
    AI_MAX_TOKENS: int = Field(default=500, ge=1)

    # -- Outbound requests made by workflow nodes ------------------------
    EXTERNAL_REQUEST_TIMEOUT: float = Field(default=30.0, gt=0)  # seconds
    MAX_RESPONSE_SIZE: int = Field(default=5 * 1024 * 1024, ge=1)  # bytes
    OUTBOUND_URL_GUARD_ENABLED: bool = True

    # -- Node defaults ---------------------------------------------------
    DEFAULT_DELAY_SECONDS: float = 5.0
    DEFAULT_LOOP_ITERATIONS: int = 3

    # -- Logging ---------------------------------------------------------
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # logs/app.log when unset
    LOG_JSON_FORMAT: bool = True
    LOG_SENSITIVE_FILTER: bool = True

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> list[str]:
        """Accept a comma-separated string or a list."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, list):
            return value
        return list(_DEFAULT_ORIGINS)

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Store level names upper-case."""
        return value.strip().upper()


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()


settings = get_settings()
