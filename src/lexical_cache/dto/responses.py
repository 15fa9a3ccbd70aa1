"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class CacheMatchItem(BaseModel):
    """The cache entry that satisfied a lookup."""

    prompt: str = Field(..., description="The matched prompt from cache")
    response: str = Field(..., description="The cached response")
    similarity: float = Field(
        ...,
        description="Jaccard similarity of token sets (1 = identical, 0 = disjoint)",
        ge=0.0,
        le=1.0,
    )


class CacheCheckResponse(BaseModel):
    """Response DTO for cache check operation."""

    prompt: str = Field(..., description="The original query prompt")
    is_hit: bool = Field(..., description="Whether a cache entry scored above the threshold")
    match: CacheMatchItem | None = Field(
        None,
        description="First matching entry in store order, if any",
    )
    lookup_time_ms: float = Field(..., description="Time taken for the cache lookup in milliseconds")


class CacheStoreResponse(BaseModel):
    """Response DTO for cache store operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    key: str = Field(..., description="The storage key for the entry")
    message: str = Field(..., description="Human-readable status message")


class CompletionResponse(BaseModel):
    """Response DTO for a cached chat completion."""

    prompt: str = Field(..., description="The original prompt")
    response: str = Field(..., description="The answer")
    cached: bool = Field(..., description="Whether the answer came from the cache")
    match: CacheMatchItem | None = Field(None, description="The cache entry used, on a hit")


class SimilarityResponse(BaseModel):
    """Response DTO for prompt similarity."""

    prompt_a: str
    prompt_b: str
    similarity: float = Field(..., ge=0.0, le=1.0)
    tokens_a: list[str] = Field(..., description="Distinct tokens of prompt_a, sorted")
    tokens_b: list[str] = Field(..., description="Distinct tokens of prompt_b, sorted")


class CacheDeleteResponse(BaseModel):
    """Response DTO for delete/clear operations."""

    success: bool
    deleted_count: int = Field(..., ge=0)
    message: str


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    total_entries: int = Field(
        ...,
        description="Total number of cached entries",
        ge=0,
    )
    backend: str = Field(..., description="Store backend name")
    threshold: float = Field(
        ...,
        description="Current similarity threshold",
        ge=0.0,
        le=1.0,
    )
    case_sensitive: bool = Field(..., description="Whether tokens are compared without case-folding")
    completion_model: str | None = Field(None, description="Model used on cache misses")
    performance: dict[str, float | int] = Field(
        default_factory=dict,
        description="Hit/miss and provider call counters",
    )


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    cache_healthy: bool = Field(..., description="Whether the cache backend is reachable")
    provider_healthy: bool | None = Field(
        None,
        description="Whether the completion provider is reachable",
    )
