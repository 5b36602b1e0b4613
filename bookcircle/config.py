"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache), single instance per process

Design Decisions:
    - Defaults provided for all non-secret settings so docker-compose works out of the box
    - Rate limit and page size bounds live here, not in route modules
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://bookcircle:bookcircle@db:5432/bookcircle"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted providers hand out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Identity provider (Clerk Backend API)
    clerk_secret_key: str = "sk_test_placeholder"
    clerk_api_url: str = "https://api.clerk.com/v1"
    clerk_timeout_seconds: float = 10.0
    clerk_jwks_url: str = "https://api.clerk.com/v1/jwks"
    clerk_jwt_key: str | None = None  # PEM public key; skips the JWKS fetch
    clerk_jwt_issuer: str | None = None
    clerk_authorized_parties: list[str] = []
    clerk_jwt_leeway_seconds: int = 5
    identity_batch_size: int = 100
    identity_username_scan_limit: int = 200

    # Anthropic
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_max_retries: int = 2
    anthropic_timeout_seconds: int = 60
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 20_000
    recommendation_model: str = "claude-3-5-haiku-latest"
    recommendation_max_tokens: int = 1024
    recommendation_max_titles: int = 5

    # Rate limiting (sliding window per user)
    rate_limit_max_requests: int = 5
    rate_limit_window_seconds: int = 60

    # Feeds
    feed_default_limit: int = 10
    feed_max_limit: int = 50
    list_take_limit: int = 100

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
