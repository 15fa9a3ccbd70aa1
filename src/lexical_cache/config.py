import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

from lexical_cache.errors import ConfigurationMissingError

load_dotenv()

CACHE_BACKENDS = ("redis", "memory")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_backend: str = os.getenv("CACHE_BACKEND", "redis").lower()
    cache_similarity_threshold: float = float(os.getenv("CACHE_SIMILARITY_THRESHOLD", "0.25"))
    cache_case_sensitive: bool = os.getenv("CACHE_CASE_SENSITIVE", "false").lower() == "true"
    cache_deduplicate_inflight: bool = (
        os.getenv("CACHE_DEDUPLICATE_INFLIGHT", "false").lower() == "true"
    )

    # OpenAI chat completions
    openai_api_key: str | None = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openai_model: str = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
    openai_system_prompt: str = os.getenv(
        "OPENAI_SYSTEM_PROMPT",
        "You are a helpful assistant. Give concise answers.",
    )
    openai_temperature: float = float(os.getenv("OPENAI_TEMPERATURE", "0.8"))
    openai_max_tokens: int = int(os.getenv("OPENAI_MAX_TOKENS", "200"))
    openai_top_p: float = float(os.getenv("OPENAI_TOP_P", "1.0"))
    openai_timeout: float = float(os.getenv("OPENAI_TIMEOUT", "30.0"))

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    def require_openai_api_key(self) -> str:
        """Return the OpenAI credential or fail fast.

        Returns:
            The configured API key

        Raises:
            ConfigurationMissingError: If OPENAI_API_KEY is not set
        """
        if not self.openai_api_key:
            raise ConfigurationMissingError("OPENAI_API_KEY Not defined in the environment")
        return self.openai_api_key

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0 <= self.cache_similarity_threshold <= 1:
            raise ValueError("CACHE_SIMILARITY_THRESHOLD must be between 0 and 1 for Jaccard similarity")

        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"CACHE_BACKEND must be one of {list(CACHE_BACKENDS)}, got {self.cache_backend!r}"
            )

        if self.openai_max_tokens <= 0:
            raise ValueError("OPENAI_MAX_TOKENS must be positive")

        if not 0 <= self.openai_top_p <= 1:
            raise ValueError("OPENAI_TOP_P must be between 0 and 1")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client() -> redis.Redis:
    """Create an asyncio Redis client instance.

    Responses are decoded so that keys come back as the original prompt strings.
    """
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=True,
    )
