import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./advocates.db")
    database_echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"
    store_timeout_seconds: float = float(os.getenv("STORE_TIMEOUT_SECONDS", "5.0"))

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "memory")  # "memory" or "redis"
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "advocates")
    cache_list_ttl: int = int(os.getenv("CACHE_LIST_TTL", "300"))  # 5 minutes
    cache_search_ttl: int = int(os.getenv("CACHE_SEARCH_TTL", "60"))  # 1 minute

    # Pagination. The limit floor is 10: smaller pages are raised to 10.
    page_max: int = int(os.getenv("PAGE_MAX", "120000"))
    page_limit_min: int = int(os.getenv("PAGE_LIMIT_MIN", "10"))
    page_limit_max: int = int(os.getenv("PAGE_LIMIT_MAX", "100"))
    page_limit_default: int = int(os.getenv("PAGE_LIMIT_DEFAULT", "10"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def uses_redis(self) -> bool:
        """Check if the Redis cache backend is configured."""
        return self.cache_backend.lower() == "redis"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.cache_backend.lower() not in ("memory", "redis"):
            raise ValueError(f"CACHE_BACKEND must be 'memory' or 'redis', got {self.cache_backend!r}")

        if self.cache_list_ttl <= 0 or self.cache_search_ttl <= 0:
            raise ValueError("CACHE_LIST_TTL and CACHE_SEARCH_TTL must be positive")

        if self.page_limit_min < 1:
            raise ValueError("PAGE_LIMIT_MIN must be at least 1")

        if self.page_limit_min > self.page_limit_max:
            raise ValueError(
                f"PAGE_LIMIT_MIN ({self.page_limit_min}) must not exceed "
                f"PAGE_LIMIT_MAX ({self.page_limit_max})"
            )

        if self.page_max < 1:
            raise ValueError("PAGE_MAX must be at least 1")

        if self.store_timeout_seconds <= 0:
            raise ValueError("STORE_TIMEOUT_SECONDS must be positive")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance."""
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
