"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the completion API)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (Redis → in-memory, OpenAI → compatible APIs)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from lexical_cache.protocols import CompletionProvider, KeyValueStore

from .memory_repository import InMemoryCacheRepository
from .openai_completion_provider import OpenAICompletionProvider
from .redis_repository import RedisCacheRepository

__all__ = [
    "KeyValueStore",
    "CompletionProvider",
    "RedisCacheRepository",
    "InMemoryCacheRepository",
    "OpenAICompletionProvider",
]
