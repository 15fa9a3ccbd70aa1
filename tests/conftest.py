"""
Shared fixtures for the lexical cache tests.
"""

import asyncio

import pytest

from lexical_cache.errors import ProviderError
from lexical_cache.repositories import InMemoryCacheRepository
from lexical_cache.services import CacheService


class FakeCompletionProvider:
    """Completion provider that records prompts and answers deterministically."""

    def __init__(self, fail: bool = False, delay: float = 0.0) -> None:
        self.fail = fail
        self.delay = delay
        self.prompts: list[str] = []

    @property
    def model_name(self) -> str:
        return "fake-model"

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ProviderError("upstream returned 500")
        return f"Answer to: {prompt}"

    async def is_available(self) -> bool:
        return not self.fail

    async def close(self) -> None:
        pass


@pytest.fixture
def repository():
    """Create an empty in-memory store."""
    return InMemoryCacheRepository()


@pytest.fixture
def provider_factory():
    """Expose the fake provider class for tests that need custom behaviour."""
    return FakeCompletionProvider


@pytest.fixture
def provider():
    """Create a fake completion provider."""
    return FakeCompletionProvider()


@pytest.fixture
def service(repository, provider):
    """Create a cache service with the default 0.25 threshold."""
    return CacheService(
        repository=repository,
        completion_provider=provider,
        similarity_threshold=0.25,
        case_sensitive=False,
        deduplicate_inflight=False,
    )
