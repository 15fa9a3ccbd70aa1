"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-memory, OpenAI → any chat API)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from lexical_cache.protocols import CompletionProvider, KeyValueStore

    # Type hints work with any implementation
    store: KeyValueStore = RedisCacheRepository.create()      # works
    store: KeyValueStore = InMemoryCacheRepository()         # also works
    ```
"""

from .cache_store import KeyValueStore
from .completion_provider import CompletionProvider

__all__ = [
    "KeyValueStore",
    "CompletionProvider",
]
