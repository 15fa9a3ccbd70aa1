"""Lexical Cache - prompt caching for chat completions by token-set similarity.

This package provides a layered architecture for prompt caching:

Layers:
    - similarity: Tokenizer and Jaccard scorer
    - protocols: Interface contracts (KeyValueStore, CompletionProvider)
    - repositories: Data access implementations (Redis, in-memory, OpenAI)
    - services: Business logic (lookup, admission, cached completion)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from lexical_cache.repositories import OpenAICompletionProvider, RedisCacheRepository
    from lexical_cache.services import CacheService

    cache = CacheService.create(
        repository=RedisCacheRepository.create(),
        completion_provider=OpenAICompletionProvider.create(),
    )
    result = await cache.complete("What is the capital of France?")
    ```

For HTTP API:
    ```python
    from lexical_cache.api.app import app
    ```
"""

from lexical_cache.config import get_redis_client, settings
from lexical_cache.dto import CheckCacheRequest, CompletionRequest, StoreCacheRequest
from lexical_cache.entities import CacheMatchEntity, CompletionResultEntity
from lexical_cache.errors import (
    ConfigurationMissingError,
    LexicalCacheError,
    ProviderError,
    StoreUnavailableError,
)
from lexical_cache.handlers import CacheHandler
from lexical_cache.protocols import CompletionProvider, KeyValueStore
from lexical_cache.repositories import (
    InMemoryCacheRepository,
    OpenAICompletionProvider,
    RedisCacheRepository,
)
from lexical_cache.services import CacheService
from lexical_cache.similarity import jaccard_index, similarity_score, token_set, tokenize

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Errors
    "LexicalCacheError",
    "StoreUnavailableError",
    "ProviderError",
    "ConfigurationMissingError",
    # Similarity
    "tokenize",
    "token_set",
    "jaccard_index",
    "similarity_score",
    # Protocols (interfaces)
    "KeyValueStore",
    "CompletionProvider",
    # Services (business logic)
    "CacheService",
    # Handlers (HTTP)
    "CacheHandler",
    # Repositories (data access)
    "RedisCacheRepository",
    "InMemoryCacheRepository",
    "OpenAICompletionProvider",
    # Entities (domain models)
    "CacheMatchEntity",
    "CompletionResultEntity",
    # DTOs (API contracts)
    "CheckCacheRequest",
    "StoreCacheRequest",
    "CompletionRequest",
]
