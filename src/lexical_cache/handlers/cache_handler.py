"""HTTP handlers for cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import time

from fastapi import HTTPException, status

from lexical_cache.dto import (
    CacheCheckResponse,
    CacheDeleteRequest,
    CacheDeleteResponse,
    CacheMatchItem,
    CacheStatsResponse,
    CacheStoreResponse,
    CheckCacheRequest,
    CompletionRequest,
    CompletionResponse,
    HealthCheckResponse,
    SimilarityRequest,
    SimilarityResponse,
    StoreCacheRequest,
    ThresholdRequest,
)
from lexical_cache.entities import CacheMatchEntity
from lexical_cache.errors import ProviderError, StoreUnavailableError
from lexical_cache.services import CacheService
from lexical_cache.similarity import jaccard_index, token_set


def to_http_error(action: str, error: Exception) -> HTTPException:
    """Map a service error to an HTTP error.

    StoreUnavailableError -> 503, ProviderError -> 502, ValueError -> 400,
    anything else -> 500.
    """
    if isinstance(error, StoreUnavailableError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, ProviderError):
        status_code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(error, ValueError):
        status_code = status.HTTP_400_BAD_REQUEST
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return HTTPException(status_code=status_code, detail=f"Failed to {action}: {error}")


def to_match_item(match: CacheMatchEntity | None) -> CacheMatchItem | None:
    if match is None:
        return None
    return CacheMatchItem(prompt=match.prompt, response=match.response, similarity=match.score)


class CacheHandler:
    """HTTP handlers for cache operations.

    This handler delegates business logic to CacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes
    - Error handling and responses

    Example:
        ```python
        handler = CacheHandler(cache_service=cache_service)

        @app.post("/cache/check", response_model=CacheCheckResponse)
        async def check_cache(request: CheckCacheRequest):
            return await handler.check_cache(request)
        ```
    """

    def __init__(self, cache_service: CacheService) -> None:
        """Initialize the cache handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def check_cache(self, request: CheckCacheRequest) -> CacheCheckResponse:
        """Handle POST /cache/check requests.

        Args:
            request: The check cache request DTO

        Returns:
            CacheCheckResponse with hit status and the matching entry

        Raises:
            HTTPException: If an error occurs during cache check
        """
        try:
            start_time = time.time()
            match = await self._cache.lookup(prompt=request.prompt, threshold=request.threshold)
            lookup_time_ms = (time.time() - start_time) * 1000

            return CacheCheckResponse(
                prompt=request.prompt,
                is_hit=match is not None,
                match=to_match_item(match),
                lookup_time_ms=lookup_time_ms,
            )

        except Exception as e:
            raise to_http_error("check cache", e) from e

    async def store_cache(self, request: StoreCacheRequest) -> CacheStoreResponse:
        """Handle POST /cache/store requests.

        Args:
            request: The store cache request DTO

        Returns:
            CacheStoreResponse with storage confirmation

        Raises:
            HTTPException: If an error occurs during storage
        """
        try:
            key = await self._cache.store(prompt=request.prompt, response=request.response)

            return CacheStoreResponse(
                success=True,
                key=key,
                message="Entry stored successfully",
            )

        except Exception as e:
            raise to_http_error("store entry", e) from e

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """Handle POST /completions requests.

        Args:
            request: The completion request DTO

        Returns:
            CompletionResponse with the answer and whether it was cached

        Raises:
            HTTPException: 502 if the provider fails, 503 if the store is down
        """
        try:
            result = await self._cache.complete(request.prompt)

            return CompletionResponse(
                prompt=result.prompt,
                response=result.response,
                cached=result.cached,
                match=to_match_item(result.match),
            )

        except Exception as e:
            raise to_http_error("get completion", e) from e

    async def similarity(self, request: SimilarityRequest) -> SimilarityResponse:
        """Handle POST /similarity requests."""
        tokens_a = token_set(request.prompt_a, case_sensitive=self._cache.case_sensitive)
        tokens_b = token_set(request.prompt_b, case_sensitive=self._cache.case_sensitive)

        return SimilarityResponse(
            prompt_a=request.prompt_a,
            prompt_b=request.prompt_b,
            similarity=jaccard_index(tokens_a, tokens_b),
            tokens_a=sorted(tokens_a),
            tokens_b=sorted(tokens_b),
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests.

        Returns:
            CacheStatsResponse with cache statistics

        Raises:
            HTTPException: If an error occurs while fetching stats
        """
        try:
            stats = await self._cache.get_stats()

            return CacheStatsResponse(
                total_entries=stats.get("total_entries", 0),
                backend=stats.get("backend", ""),
                threshold=stats.get("similarity_threshold", 0.0),
                case_sensitive=stats.get("case_sensitive", False),
                completion_model=stats.get("completion_model"),
                performance=stats.get("performance", {}),
            )

        except Exception as e:
            raise to_http_error("get stats", e) from e

    async def delete_cache(self, request: CacheDeleteRequest) -> CacheDeleteResponse:
        """Handle DELETE /cache requests.

        Deletes the entry for an exact prompt, or clears everything when no
        prompt is given.

        Returns:
            CacheDeleteResponse with the number of deleted entries
        """
        try:
            if request.prompt is None:
                count = await self._cache.clear()
                message = "Cache cleared successfully"
            else:
                count = int(await self._cache.delete_by_prompt(request.prompt))
                message = "Entry deleted" if count else "No entry for prompt"

            return CacheDeleteResponse(success=True, deleted_count=count, message=message)

        except Exception as e:
            raise to_http_error("delete from cache", e) from e

    async def get_threshold(self) -> dict[str, float]:
        """Handle GET /cache/threshold requests."""
        return {"threshold": self._cache.threshold}

    async def set_threshold(self, request: ThresholdRequest) -> dict:
        """Handle POST /cache/threshold requests."""
        try:
            self._cache.set_threshold(request.threshold)
        except ValueError as e:
            raise to_http_error("update threshold", e) from e

        return {"message": "Threshold updated", "threshold": self._cache.threshold}

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests.

        Returns:
            HealthCheckResponse with health status
        """
        health = await self._cache.health()
        is_healthy = all(value is not False for value in health.values())

        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=bool(health["cache_healthy"]),
            provider_healthy=health["provider_healthy"],
        )
