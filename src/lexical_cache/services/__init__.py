"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from lexical_cache.services import CacheService

    # Using factory method (recommended)
    cache = CacheService.create(repository=repo, completion_provider=provider)
    cache = CacheService.create(repository=repo, similarity_threshold=0.4)

    # Or manual creation
    cache = CacheService(repository=repo, deduplicate_inflight=True)
    ```
"""

from .cache_service import CacheService

__all__ = [
    "CacheService",
]
