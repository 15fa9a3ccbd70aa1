"""
Tests for cache lookup, admission and cached completion.
"""

import asyncio

import pytest

from lexical_cache.errors import ConfigurationMissingError, ProviderError, StoreUnavailableError
from lexical_cache.repositories import InMemoryCacheRepository
from lexical_cache.services import CacheService


class UnreachableRepository(InMemoryCacheRepository):
    """Store whose every read fails."""

    async def keys(self) -> list[str]:
        raise StoreUnavailableError("connection refused")

    async def health_check(self) -> bool:
        return False


class VanishingRepository(InMemoryCacheRepository):
    """Store that lists a key it can no longer read."""

    async def keys(self) -> list[str]:
        return ["hello world"] + await super().keys()


def test_lookup_exact_prompt_hits(service, repository):
    asyncio.run(repository.set("hello world", "greeting response"))

    match = asyncio.run(service.lookup("hello world"))

    assert match is not None
    assert match.prompt == "hello world"
    assert match.response == "greeting response"
    assert match.score == 1.0


def test_lookup_empty_store_misses(service):
    assert asyncio.run(service.lookup("anything at all")) is None
    assert asyncio.run(service.lookup("")) is None


def test_lookup_apostrophe_variant_hits(service, repository):
    asyncio.run(repository.set("What is the capital of France?", "Paris"))

    match = asyncio.run(service.lookup("What's the capital city of France?"))

    assert match is not None
    assert match.response == "Paris"
    assert match.score == pytest.approx(5 / 8)


def test_lookup_unrelated_prompt_misses(service, repository):
    asyncio.run(repository.set("What is the capital of France?", "Paris"))

    assert asyncio.run(service.lookup("How do I bake sourdough bread?")) is None


def test_lookup_threshold_is_strict(repository):
    # {a, b} vs {a, b, c, d, e, f, g, h}: exactly 0.25
    asyncio.run(repository.set("a b c d e f g h", "cached"))
    service = CacheService(repository=repository, similarity_threshold=0.25)

    assert asyncio.run(service.lookup("a b")) is None
    assert asyncio.run(service.lookup("a b", threshold=0.2)) is not None


def test_lookup_first_match_in_store_order_wins(service, repository):
    asyncio.run(repository.set("tell me about python snakes", "first"))
    asyncio.run(repository.set("tell me about python programming", "second"))

    match = asyncio.run(service.lookup("tell me about python programming"))

    # The second key is a perfect match, but the first also clears the threshold.
    assert match.response == "first"
    assert match.score < 1.0


def test_lookup_is_idempotent_and_read_only(service, repository):
    asyncio.run(repository.set("hello world", "greeting response"))

    first = asyncio.run(service.lookup("hello there world"))
    second = asyncio.run(service.lookup("hello there world"))

    assert first == second
    assert asyncio.run(repository.keys()) == ["hello world"]


def test_lookup_skips_vanished_key():
    repository = VanishingRepository({"hello big world": "still here"})
    service = CacheService(repository=repository, similarity_threshold=0.25)

    match = asyncio.run(service.lookup("hello world"))

    assert match.prompt == "hello big world"


def test_lookup_store_unavailable_propagates():
    service = CacheService(repository=UnreachableRepository())

    with pytest.raises(StoreUnavailableError):
        asyncio.run(service.lookup("hello"))


def test_lookup_rejects_invalid_threshold(service):
    with pytest.raises(ValueError):
        asyncio.run(service.lookup("hello", threshold=1.5))


def test_lookup_records_metrics(service, repository):
    asyncio.run(repository.set("hello world", "greeting response"))

    asyncio.run(service.lookup("hello world"))
    asyncio.run(service.lookup("goodbye moon"))

    assert service.metrics.cache_hits == 1
    assert service.metrics.cache_misses == 1
    assert service.metrics.hit_rate == 0.5


def test_store_uses_raw_prompt_as_key(service, repository):
    key = asyncio.run(service.store("  What's UP?  ", "not much"))

    assert key == "  What's UP?  "
    assert asyncio.run(repository.get("  What's UP?  ")) == "not much"


def test_complete_miss_calls_provider_and_stores(service, repository, provider):
    result = asyncio.run(service.complete("What is the capital of France?"))

    assert result.cached is False
    assert result.match is None
    assert result.response == "Answer to: What is the capital of France?"
    assert provider.prompts == ["What is the capital of France?"]
    assert asyncio.run(repository.get("What is the capital of France?")) == result.response


def test_complete_similar_prompt_served_from_cache(service, provider):
    first = asyncio.run(service.complete("What is the capital of France?"))
    second = asyncio.run(service.complete("What's the capital city of France?"))

    assert second.cached is True
    assert second.response == first.response
    assert second.match.prompt == "What is the capital of France?"
    assert len(provider.prompts) == 1
    assert service.metrics.provider_calls == 1


def test_complete_provider_failure_is_not_cached(repository, provider_factory):
    provider = provider_factory(fail=True)
    service = CacheService(repository=repository, completion_provider=provider)

    with pytest.raises(ProviderError):
        asyncio.run(service.complete("hello world"))

    assert asyncio.run(repository.count_all()) == 0
    assert service.metrics.provider_errors == 1


def test_complete_without_provider(repository):
    service = CacheService(repository=repository)

    with pytest.raises(ConfigurationMissingError):
        asyncio.run(service.complete("hello world"))


def test_concurrent_misses_without_deduplication(repository, provider_factory):
    provider = provider_factory(delay=0.01)
    service = CacheService(
        repository=repository,
        completion_provider=provider,
        deduplicate_inflight=False,
    )

    async def run():
        return await asyncio.gather(service.complete("same prompt"), service.complete("same prompt"))

    results = asyncio.run(run())

    assert len(provider.prompts) == 2
    assert all(not result.cached for result in results)
    assert asyncio.run(repository.keys()) == ["same prompt"]


def test_concurrent_misses_with_deduplication(repository, provider_factory):
    provider = provider_factory(delay=0.01)
    service = CacheService(
        repository=repository,
        completion_provider=provider,
        deduplicate_inflight=True,
    )

    async def run():
        return await asyncio.gather(service.complete("same prompt"), service.complete("same prompt"))

    first, second = asyncio.run(run())

    assert provider.prompts == ["same prompt"]
    assert first.response == second.response == "Answer to: same prompt"


def test_deduplicated_failure_reaches_every_waiter(repository, provider_factory):
    provider = provider_factory(fail=True, delay=0.01)
    service = CacheService(
        repository=repository,
        completion_provider=provider,
        deduplicate_inflight=True,
    )

    async def run():
        return await asyncio.gather(
            service.complete("same prompt"),
            service.complete("same prompt"),
            return_exceptions=True,
        )

    results = asyncio.run(run())

    assert all(isinstance(result, ProviderError) for result in results)
    assert provider.prompts == ["same prompt"]
    assert asyncio.run(repository.count_all()) == 0


def test_deduplicated_fetch_survives_cancelled_starter(repository, provider_factory):
    provider = provider_factory(delay=0.05)
    service = CacheService(
        repository=repository,
        completion_provider=provider,
        deduplicate_inflight=True,
    )

    async def run():
        starter = asyncio.ensure_future(service.complete("same prompt"))
        await asyncio.sleep(0)
        joiner = asyncio.ensure_future(service.complete("same prompt"))
        await asyncio.sleep(0.01)
        starter.cancel()
        result = await joiner
        return starter, result

    starter, result = asyncio.run(run())

    assert starter.cancelled()
    assert result.response == "Answer to: same prompt"
    assert result.cached is False
    assert provider.prompts == ["same prompt"]
    assert asyncio.run(repository.get("same prompt")) == "Answer to: same prompt"


def test_delete_and_clear(service, repository):
    asyncio.run(service.store("one", "1"))
    asyncio.run(service.store("two", "2"))

    assert asyncio.run(service.delete_by_prompt("one")) is True
    assert asyncio.run(service.delete_by_prompt("one")) is False
    assert asyncio.run(service.clear()) == 1
    assert asyncio.run(repository.count_all()) == 0


def test_get_stats(service):
    asyncio.run(service.store("hello world", "hi"))

    stats = asyncio.run(service.get_stats())

    assert stats["backend"] == "memory"
    assert stats["total_entries"] == 1
    assert stats["similarity_threshold"] == 0.25
    assert stats["completion_model"] == "fake-model"
    assert "hit_rate" in stats["performance"]


def test_health(service):
    assert asyncio.run(service.is_healthy()) is True

    unhealthy = CacheService(repository=UnreachableRepository())
    assert asyncio.run(unhealthy.health()) == {"cache_healthy": False, "provider_healthy": None}
    assert asyncio.run(unhealthy.is_healthy()) is False


def test_set_threshold_validates(service):
    service.set_threshold(0.5)
    assert service.threshold == 0.5

    with pytest.raises(ValueError):
        service.set_threshold(-0.1)
