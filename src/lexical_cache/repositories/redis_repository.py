"""Redis implementation of KeyValueStore.

Entries are plain Redis strings: the key is the raw prompt, the value is the
cached response. It's the default implementation and satisfies the
KeyValueStore protocol.
"""

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from lexical_cache.config import get_redis_client
from lexical_cache.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


class RedisCacheRepository:
    """Redis implementation using plain string keys.

    This class satisfies the KeyValueStore protocol through structural
    typing - no explicit inheritance needed.

    The whole Redis database is the cache key space: enumeration uses
    SCAN over every key, so point REDIS_URL at a dedicated database.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        match: str = "*",
    ) -> None:
        """Initialize the Redis cache repository.

        Args:
            redis_client: Asyncio Redis client with decode_responses=True.
                          If None, creates default.
            match: SCAN pattern used to enumerate keys.
        """
        self._client = redis_client or get_redis_client()
        self._match = match

    @classmethod
    def create(cls, redis_client: redis.Redis | None = None) -> "RedisCacheRepository":
        """Factory method to create RedisCacheRepository with defaults.

        Args:
            redis_client: Redis client. If None, uses settings.

        Returns:
            Configured RedisCacheRepository
        """
        return cls(redis_client=redis_client)

    async def keys(self) -> list[str]:
        """Enumerate every key in the database.

        SCAN may yield a key more than once; repeats are dropped.

        Returns:
            Distinct keys in first-seen SCAN order (not stable across calls)

        Raises:
            StoreUnavailableError: If Redis fails or a key is not valid UTF-8
        """
        try:
            keys = [key async for key in self._client.scan_iter(match=self._match)]
        except (RedisError, UnicodeDecodeError) as e:
            raise StoreUnavailableError(f"Failed to enumerate keys: {e}") from e
        return list(dict.fromkeys(keys))

    async def get(self, key: str) -> str | None:
        """Fetch the value stored under an exact key.

        Args:
            key: The prompt string used as key

        Returns:
            The cached response, or None if the key is missing

        Raises:
            StoreUnavailableError: If Redis fails or the value is not valid UTF-8
        """
        try:
            return await self._client.get(key)
        except (RedisError, UnicodeDecodeError) as e:
            raise StoreUnavailableError(f"Failed to read key: {e}") from e

    async def set(self, key: str, value: str) -> None:
        """Store a value under an exact key (no expiry).

        Args:
            key: The prompt string used as key
            value: The response to cache
        """
        try:
            await self._client.set(key, value)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to write key: {e}") from e

    async def delete(self, key: str) -> bool:
        """Delete a specific entry by key.

        Args:
            key: The storage key to delete

        Returns:
            True if deleted, False otherwise
        """
        try:
            result: int = await self._client.delete(key)
        except RedisError as e:
            raise StoreUnavailableError(f"Failed to delete key: {e}") from e
        return result > 0

    async def clear_all(self) -> int:
        """Clear all entries from the cache.

        Returns:
            Number of entries deleted
        """
        count = 0
        for key in await self.keys():
            if await self.delete(key):
                count += 1
        logger.info("Cleared %d cache entries", count)
        return count

    async def count_all(self) -> int:
        """Count total entries in the cache.

        Returns:
            Total number of cached entries
        """
        return len(await self.keys())

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning("Redis health check failed: %s", e)
            return False

    async def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with stats
        """
        return {
            "backend": "redis",
            "total_entries": await self.count_all(),
        }

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
