"""Application configuration from environment."""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from env / .env."""

    app_name: str = "Level Up Arena"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite+aiosqlite:///./arena.db"
    seed_on_startup: bool = True

    # Signed session cookie identifying the player
    secret_key: str = "change-me-in-production-use-env"
    auth_cookie_name: str = "arena_auth"
    auth_cookie_max_age: int = 60 * 60 * 24 * 14  # 14 days

    # Text generation (coaching)
    anthropic_api_key: str = ""
    coaching_model: str = "claude-sonnet-4-5"
    coaching_timeout_seconds: float = 15.0
    coaching_max_tokens: int = 300
    coaching_temperature: float = 0.4
    # fixed seed makes fallback template selection reproducible
    fallback_seed: int | None = None

    # Engine
    reflection_award: int = 10
    max_coaching_exchanges: int = 3
    autosave_debounce_seconds: float = 0.5

    # Input limits enforced at the HTTP boundary
    min_reflection_length: int = 20
    min_reply_length: int = 10
    max_text_length: int = 10000

    # Coaching requests per user per window
    coaching_rate_limit: int = 20
    coaching_rate_window_seconds: float = 60.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()


