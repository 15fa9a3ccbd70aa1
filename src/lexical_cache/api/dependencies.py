"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from lexical_cache.config import settings
from lexical_cache.handlers import CacheHandler
from lexical_cache.repositories import (
    InMemoryCacheRepository,
    OpenAICompletionProvider,
    RedisCacheRepository,
)
from lexical_cache.services import CacheService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> CacheHandler:
    """Dependency injection for CacheHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The CacheHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "cache_handler", None)
    if handler is None:
        raise RuntimeError("CacheHandler not initialized. Check lifespan setup.")
    return handler


def build_repository() -> RedisCacheRepository | InMemoryCacheRepository:
    """Create the store selected by CACHE_BACKEND."""
    if settings.cache_backend == "memory":
        return InMemoryCacheRepository()
    return RedisCacheRepository.create()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Completion provider - fails fast if OPENAI_API_KEY is missing
    2. Repository (data access) - Redis or in-memory per CACHE_BACKEND
    3. Service (business logic) - owned by the handler
    4. Handler (HTTP endpoints) - stored in app.state.cache_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Raises:
        ConfigurationMissingError: If the API credential is not configured

    Cleanup:
        Closes connections and removes all services from app.state on shutdown
    """
    completion_provider = OpenAICompletionProvider.create(api_key=settings.require_openai_api_key())
    repository = build_repository()

    cache_service = CacheService(
        repository=repository,
        completion_provider=completion_provider,
    )
    cache_handler = CacheHandler(cache_service=cache_service)

    app.state.cache_handler = cache_handler
    app.state.completion_provider = completion_provider
    app.state.repository = repository

    logger.info("Cache service initialized (backend=%s)", settings.cache_backend)
    logger.info("Threshold: %s", cache_service.threshold)
    logger.info("Store healthy: %s", await repository.health_check())

    yield

    await completion_provider.close()
    await repository.close()

    del app.state.cache_handler
    del app.state.completion_provider
    del app.state.repository
    logger.info("Cache service shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[CacheHandler, Depends(get_handler)]
