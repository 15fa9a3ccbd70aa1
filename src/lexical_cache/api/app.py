import logging
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lexical_cache.api.dependencies import HandlerDep, lifespan
from lexical_cache.config import settings
from lexical_cache.dto import (
    CacheCheckResponse,
    CacheDeleteRequest,
    CacheDeleteResponse,
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

app = FastAPI(
    title="Lexical Cache API",
    description="Prompt cache for chat completions using token-set similarity and Redis",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Lexical Cache API",
        "version": "0.1.0",
        "description": "Prompt cache for chat completions using token-set similarity and Redis",
        "endpoints": {
            "completions": "/completions",
            "cache": "/cache",
            "similarity": "/similarity",
            "stats": "/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.post("/completions", response_model=CompletionResponse)
async def complete(request: CompletionRequest, handler: HandlerDep) -> CompletionResponse:
    """Answer a prompt from the cache, calling the completion API on a miss."""
    return await handler.complete(request)


@app.post("/cache/check", response_model=CacheCheckResponse)
async def check_cache(request: CheckCacheRequest, handler: HandlerDep) -> CacheCheckResponse:
    """Check cache for a lexically similar prompt without calling the completion API."""
    return await handler.check_cache(request)


@app.post("/cache/store", response_model=CacheStoreResponse)
async def store_cache(request: StoreCacheRequest, handler: HandlerDep) -> CacheStoreResponse:
    """Store a prompt/response pair in the cache."""
    return await handler.store_cache(request)


@app.delete("/cache", response_model=CacheDeleteResponse)
async def delete_cache(handler: HandlerDep, prompt: str | None = None) -> CacheDeleteResponse:
    """Delete the entry for an exact prompt, or clear the cache if no prompt is given."""
    return await handler.delete_cache(CacheDeleteRequest(prompt=prompt))


@app.get("/cache/threshold", response_model=dict[str, float])
async def get_threshold(handler: HandlerDep) -> dict[str, float]:
    """Get the current similarity threshold."""
    return await handler.get_threshold()


@app.post("/cache/threshold", response_model=dict[str, Any])
async def set_threshold(request: ThresholdRequest, handler: HandlerDep) -> dict[str, Any]:
    """Update the similarity threshold."""
    return await handler.set_threshold(request)


@app.post("/similarity", response_model=SimilarityResponse)
async def similarity(request: SimilarityRequest, handler: HandlerDep) -> SimilarityResponse:
    """Score two prompts with the cache's tokenizer and Jaccard index."""
    return await handler.similarity(request)


@app.get("/stats", response_model=CacheStatsResponse)
async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "lexical_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
