"""Cache service for core business logic.

This service orchestrates cache operations by coordinating
the repository (key-value store) and the completion provider.

Lookup policy:
    Every stored key is scored against the incoming prompt in the order the
    store yields them. The first key scoring strictly above the threshold
    wins; there is no ranking among several qualifying keys. The scan is
    linear in the number of stored prompts.
"""

import asyncio
import functools
import logging
import time

from lexical_cache.config import settings
from lexical_cache.entities import CacheMatchEntity, CompletionResultEntity
from lexical_cache.errors import ConfigurationMissingError, ProviderError
from lexical_cache.models import PerformanceMetrics
from lexical_cache.protocols import CompletionProvider, KeyValueStore
from lexical_cache.similarity import jaccard_index, token_set

logger = logging.getLogger(__name__)


def validate_threshold(threshold: float) -> float:
    if not 0 <= threshold <= 1:
        raise ValueError("Threshold must be between 0 and 1")
    return threshold


class CacheService:
    """Core cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - KeyValueStore: can be Redis, in-memory, etc.
    - CompletionProvider: can be OpenAI or any compatible API

    Example:
        ```python
        from lexical_cache.repositories import OpenAICompletionProvider, RedisCacheRepository
        from lexical_cache.services import CacheService

        cache = CacheService.create(
            repository=RedisCacheRepository.create(),
            completion_provider=OpenAICompletionProvider.create(),
        )
        result = await cache.complete("What is the capital of France?")
        ```
    """

    def __init__(
        self,
        repository: KeyValueStore,
        completion_provider: CompletionProvider | None = None,
        similarity_threshold: float | None = None,
        case_sensitive: bool | None = None,
        deduplicate_inflight: bool | None = None,
    ) -> None:
        """Initialize the cache service.

        Args:
            repository: Key-value store holding prompt -> response entries (required).
            completion_provider: Called on cache misses by complete(). Optional for
                                 lookup-only use.
            similarity_threshold: A key must score strictly above this (0-1) to hit.
                                  Defaults to settings.
            case_sensitive: Disable case-folding in the tokenizer. Defaults to settings.
            deduplicate_inflight: Collapse concurrent misses for the same prompt into
                                  one provider call. Defaults to settings.
        """
        self._repository = repository
        self._provider = completion_provider
        self._threshold = validate_threshold(
            settings.cache_similarity_threshold
            if similarity_threshold is None
            else similarity_threshold
        )
        self._case_sensitive = (
            settings.cache_case_sensitive if case_sensitive is None else case_sensitive
        )
        self._deduplicate_inflight = (
            settings.cache_deduplicate_inflight
            if deduplicate_inflight is None
            else deduplicate_inflight
        )
        self._inflight: dict[str, asyncio.Task[str]] = {}
        self._metrics = PerformanceMetrics()

    @classmethod
    def create(
        cls,
        repository: KeyValueStore,
        completion_provider: CompletionProvider | None = None,
        similarity_threshold: float | None = None,
    ) -> "CacheService":
        """Factory method to create CacheService with sensible defaults.

        Args:
            repository: Key-value store (required).
            completion_provider: Completion API used on misses.
            similarity_threshold: Threshold for cache hits. If None, uses settings.

        Returns:
            Configured CacheService instance
        """
        return cls(
            repository=repository,
            completion_provider=completion_provider,
            similarity_threshold=similarity_threshold,
        )

    async def lookup(
        self,
        prompt: str,
        threshold: float | None = None,
    ) -> CacheMatchEntity | None:
        """Find a cached response for a lexically similar prompt.

        Business logic:
        1. Enumerate all keys in the store
        2. Score each key against the prompt, in store order
        3. Return the first key scoring strictly above the threshold
        4. Return None if nothing qualifies (cache miss)

        Args:
            prompt: The prompt to search for
            threshold: Override default similarity threshold

        Returns:
            CacheMatchEntity if found, None otherwise

        Raises:
            StoreUnavailableError: If the store cannot be read
        """
        threshold = self._threshold if threshold is None else validate_threshold(threshold)

        start_time = time.time()
        match = await self._scan(prompt, threshold)
        lookup_time_ms = (time.time() - start_time) * 1000

        if match is None:
            self._metrics.record_miss(lookup_time_ms)
            logger.debug("Cache miss for prompt: (%s)", prompt)
        else:
            self._metrics.record_hit(lookup_time_ms)
            logger.info("Cache hit for prompt: (%s)", match.prompt)

        return match

    async def _scan(self, prompt: str, threshold: float) -> CacheMatchEntity | None:
        query_tokens = token_set(prompt, case_sensitive=self._case_sensitive)

        for key in await self._repository.keys():
            score = jaccard_index(
                query_tokens,
                token_set(key, case_sensitive=self._case_sensitive),
            )
            if score <= threshold:
                continue

            response = await self._repository.get(key)
            if response is None:
                # Removed between enumeration and read.
                logger.debug("Skipping vanished key: (%s)", key)
                continue

            return CacheMatchEntity(prompt=key, response=response, score=score)

        return None

    async def store(self, prompt: str, response: str) -> str:
        """Admit a prompt-response pair into the cache.

        The key is the exact, untokenized prompt string.

        Args:
            prompt: The original prompt text
            response: The response to cache

        Returns:
            The storage key for the entry
        """
        await self._repository.set(prompt, response)
        logger.info("Stored response for prompt: (%s)", prompt)
        return prompt

    async def complete(self, prompt: str) -> CompletionResultEntity:
        """Answer a prompt from the cache, or from the provider on a miss.

        Business logic:
        1. Look up a similar cached prompt
        2. On a hit, return the cached response
        3. On a miss, call the provider, store the response, return it

        A failed provider call is never stored.

        Args:
            prompt: The user prompt

        Returns:
            CompletionResultEntity describing where the answer came from

        Raises:
            StoreUnavailableError: If the store cannot be read or written
            ProviderError: If the completion call fails
            ConfigurationMissingError: If no completion provider is configured
        """
        match = await self.lookup(prompt)
        if match is not None:
            return CompletionResultEntity(
                prompt=prompt,
                response=match.response,
                cached=True,
                match=match,
            )

        if self._provider is None:
            raise ConfigurationMissingError("No completion provider configured")

        if self._deduplicate_inflight:
            response = await self._fetch_shared(prompt)
        else:
            response = await self._fetch_and_store(prompt)

        return CompletionResultEntity(prompt=prompt, response=response, cached=False)

    async def _fetch_and_store(self, prompt: str) -> str:
        assert self._provider is not None

        start_time = time.time()
        try:
            response = await self._provider.complete(prompt)
        except ProviderError:
            self._metrics.record_provider_error()
            raise
        self._metrics.record_provider_call((time.time() - start_time) * 1000)

        await self.store(prompt, response)
        return response

    async def _fetch_shared(self, prompt: str) -> str:
        """Fetch on a miss, sharing one provider call per exact prompt string.

        The fetch runs as its own task, so cancelling any one caller (the one
        that started it included) does not cancel the others.
        """
        task = self._inflight.get(prompt)
        if task is None:
            task = asyncio.ensure_future(self._fetch_and_store(prompt))
            self._inflight[prompt] = task
            task.add_done_callback(functools.partial(self._release_inflight, prompt))
        else:
            logger.debug("Joining in-flight request for prompt: (%s)", prompt)

        return await asyncio.shield(task)

    def _release_inflight(self, prompt: str, task: "asyncio.Task[str]") -> None:
        if self._inflight.get(prompt) is task:
            del self._inflight[prompt]
        if not task.cancelled():
            # Mark retrieved so a fetch whose callers all left does not log on collection.
            task.exception()

    async def delete_by_prompt(self, prompt: str) -> bool:
        """Delete the cache entry stored under an exact prompt.

        Args:
            prompt: The prompt to match

        Returns:
            True if deleted, False otherwise
        """
        return await self._repository.delete(prompt)

    async def clear(self) -> int:
        """Clear all cache entries.

        Returns:
            Number of entries deleted
        """
        return await self._repository.clear_all()

    async def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with cache statistics
        """
        stats = await self._repository.get_stats()
        stats["similarity_threshold"] = self._threshold
        stats["case_sensitive"] = self._case_sensitive
        stats["deduplicate_inflight"] = self._deduplicate_inflight
        stats["completion_model"] = self._provider.model_name if self._provider else None
        stats["performance"] = self._metrics.to_dict()
        return stats

    async def health(self) -> dict[str, bool | None]:
        """Check each dependency.

        Returns:
            Store health, and provider health (None if no provider is configured)
        """
        provider_healthy = None
        if self._provider is not None:
            provider_healthy = await self._provider.is_available()
        return {
            "cache_healthy": await self._repository.health_check(),
            "provider_healthy": provider_healthy,
        }

    async def is_healthy(self) -> bool:
        """Check if cache is healthy.

        Returns:
            True if the store and (when configured) the provider are healthy
        """
        health = await self.health()
        return all(value is not False for value in health.values())

    def set_threshold(self, threshold: float) -> None:
        """Update the similarity threshold.

        Args:
            threshold: New threshold value (0-1, higher = more strict)
        """
        self._threshold = validate_threshold(threshold)

    @property
    def threshold(self) -> float:
        """Get current similarity threshold."""
        return self._threshold

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def metrics(self) -> PerformanceMetrics:
        return self._metrics

    @property
    def repository(self) -> KeyValueStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def completion_provider(self) -> CompletionProvider | None:
        """Get the underlying completion provider (for testing)."""
        return self._provider
