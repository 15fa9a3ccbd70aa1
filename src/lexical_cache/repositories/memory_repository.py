"""In-process implementation of KeyValueStore.

Keys enumerate in insertion order, which makes lookups deterministic.
Useful for tests, threshold evaluation and running without Redis.
"""


class InMemoryCacheRepository:
    """Dict-backed store satisfying the KeyValueStore protocol."""

    def __init__(self, entries: dict[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    async def keys(self) -> list[str]:
        return list(self._entries)

    async def get(self, key: str) -> str | None:
        return self._entries.get(key)

    async def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def clear_all(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    async def count_all(self) -> int:
        return len(self._entries)

    async def health_check(self) -> bool:
        return True

    async def get_stats(self) -> dict:
        return {
            "backend": "memory",
            "total_entries": len(self._entries),
        }

    async def close(self) -> None:
        """Nothing to release."""
