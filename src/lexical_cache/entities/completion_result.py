"""Completion result domain entity."""

from dataclasses import dataclass

from .cache_match import CacheMatchEntity


@dataclass(frozen=True)
class CompletionResultEntity:
    """Domain entity for the outcome of a cached completion.

    Attributes:
        prompt: The incoming prompt
        response: The answer returned to the caller
        cached: True if the answer came from the cache
        match: The cache hit that produced the answer, if any
    """

    prompt: str
    response: str
    cached: bool
    match: CacheMatchEntity | None = None
