"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    CacheDeleteRequest,
    CheckCacheRequest,
    CompletionRequest,
    SimilarityRequest,
    StoreCacheRequest,
    ThresholdRequest,
)
from .responses import (
    CacheCheckResponse,
    CacheDeleteResponse,
    CacheMatchItem,
    CacheStatsResponse,
    CacheStoreResponse,
    CompletionResponse,
    HealthCheckResponse,
    SimilarityResponse,
)

__all__ = [
    "CheckCacheRequest",
    "StoreCacheRequest",
    "CompletionRequest",
    "SimilarityRequest",
    "ThresholdRequest",
    "CacheDeleteRequest",
    "CacheMatchItem",
    "CacheCheckResponse",
    "CacheStoreResponse",
    "CompletionResponse",
    "SimilarityResponse",
    "CacheDeleteResponse",
    "CacheStatsResponse",
    "HealthCheckResponse",
]
