"""Cache match domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CacheMatchEntity:
    """Domain entity for a cache lookup hit.

    Represents the first stored prompt that scored above the threshold.

    Attributes:
        prompt: The matched prompt (the store key)
        response: The cached response
        score: Jaccard similarity between the query and the matched prompt (0-1)
    """

    prompt: str
    response: str
    score: float
