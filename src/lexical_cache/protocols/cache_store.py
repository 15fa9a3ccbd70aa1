"""Key-value store protocol.

Defines the interface for any backend that holds cache entries as plain
key/value strings, where the key is the raw prompt and the value is the
cached response.

Implementations can include:
- Redis (default)
- In-memory dict (tests, evaluation)
- Any other store that can enumerate its keys
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.

    All methods raise StoreUnavailableError when the backend cannot be reached.

    Example:
        ```python
        from lexical_cache.protocols import KeyValueStore

        store: KeyValueStore = RedisCacheRepository.create()
        store: KeyValueStore = InMemoryCacheRepository()
        ```
    """

    async def keys(self) -> list[str]:
        """Enumerate every key currently in the store.

        Returns:
            All keys, in whatever order the backend yields them
        """
        ...

    async def get(self, key: str) -> str | None:
        """Fetch the value stored under an exact key.

        Args:
            key: The exact key string

        Returns:
            The stored value, or None if the key does not exist
        """
        ...

    async def set(self, key: str, value: str) -> None:
        """Store a value under an exact key, replacing any previous value.

        Args:
            key: The exact key string
            value: The value to store
        """
        ...

    async def delete(self, key: str) -> bool:
        """Delete a specific entry by key.

        Args:
            key: The exact key string

        Returns:
            True if deleted, False otherwise
        """
        ...

    async def clear_all(self) -> int:
        """Clear all entries from the store.

        Returns:
            Number of entries deleted
        """
        ...

    async def count_all(self) -> int:
        """Count total entries in the store.

        Returns:
            Total number of cached entries
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is accessible.

        Returns:
            True if healthy, False otherwise
        """
        ...

    async def get_stats(self) -> dict:
        """Get store statistics.

        Returns:
            Dictionary with stats (implementation-specific)
        """
        ...

    async def close(self) -> None:
        """Release any underlying connections."""
        ...
