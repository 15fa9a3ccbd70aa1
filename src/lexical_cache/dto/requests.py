"""Request DTOs for API endpoints."""

from pydantic import BaseModel, Field


class CheckCacheRequest(BaseModel):
    """Request DTO for checking cache.

    The handler will convert this to internal calls to the service layer.
    """

    prompt: str = Field(..., description="The prompt to search for", min_length=1)
    threshold: float | None = Field(
        None,
        description="Override the default similarity threshold (0-1, higher = more strict)",
        ge=0.0,
        le=1.0,
    )


class StoreCacheRequest(BaseModel):
    """Request DTO for storing in cache."""

    prompt: str = Field(..., description="The original user prompt", min_length=1)
    response: str = Field(..., description="The LLM response to cache", min_length=1)


class CompletionRequest(BaseModel):
    """Request DTO for a cached chat completion."""

    prompt: str = Field(..., description="The user prompt", min_length=1)


class SimilarityRequest(BaseModel):
    """Request DTO for scoring two prompts against each other."""

    prompt_a: str = Field(..., description="First prompt")
    prompt_b: str = Field(..., description="Second prompt")


class ThresholdRequest(BaseModel):
    """Request DTO for updating the similarity threshold."""

    threshold: float = Field(..., description="New similarity threshold", ge=0.0, le=1.0)


class CacheDeleteRequest(BaseModel):
    """Request DTO for deleting cache entries."""

    prompt: str | None = Field(
        None,
        description="Delete the entry stored under this exact prompt (if null, clears all)",
    )

