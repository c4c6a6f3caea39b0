from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Meeting Scheduler API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite:///./scheduler.db"
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Video account directory cache
    ACCOUNT_CACHE_TTL_SECONDS: int = 300
    DEFAULT_MAX_CONCURRENT_MEETINGS: int = 2

    MAX_CONCURRENT_LOOKUPS: int = 5
    # How far ahead booked video meetings are re-checked after roster changes
    REVALIDATION_HORIZON_DAYS: int = 30

    # Conflict suggestions
    SLOT_SEARCH_STEP_MINUTES: int = 30
    SLOT_SEARCH_WINDOW_MINUTES: int = 240
    MAX_SUGGESTIONS: int = 8
    MAX_ROOM_SUGGESTIONS: int = 3
    LOW_CAPACITY_THRESHOLD: int = 1
    LOCATION_MATCH_BONUS: float = 25.0
    CHECK_PARTICIPANT_OVERLAP: bool = True

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "SLOT_SEARCH_STEP_MINUTES", "MAX_CONCURRENT_LOOKUPS", "REVALIDATION_HORIZON_DAYS"
    )
    @classmethod
    def check_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be greater than 0")
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
