import os
from dataclasses import dataclass
from functools import lru_cache

import httpx
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Supabase / PostgREST
    supabase_url: str = os.getenv("SUPABASE_URL", "http://localhost:54321")
    supabase_key: str | None = os.getenv("SUPABASE_KEY")
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))

    # Cache
    cache_ttl: float = float(os.getenv("CACHE_TTL", "300"))  # 5 minutes default
    page_size: int = int(os.getenv("PAGE_SIZE", "12"))

    # Realtime webhooks
    webhook_secret: str | None = os.getenv("WEBHOOK_SECRET")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def rest_url(self) -> str:
        """Base URL of the PostgREST endpoint."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_ttl <= 0:
            raise ValueError("CACHE_TTL must be a positive number of seconds")

        if not 1 <= self.page_size <= 100:
            raise ValueError(f"PAGE_SIZE must be between 1 and 100, got {self.page_size}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_http_client() -> httpx.AsyncClient:
    """Create an async HTTP client for the PostgREST endpoint."""
    headers = {"Accept": "application/json"}
    if settings.supabase_key:
        headers["apikey"] = settings.supabase_key
        headers["Authorization"] = f"Bearer {settings.supabase_key}"

    return httpx.AsyncClient(
        base_url=settings.rest_url,
        headers=headers,
        timeout=settings.http_timeout,
    )
