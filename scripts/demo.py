#!/usr/bin/env python3
"""
Demo script for the lexical cache.

Scores two related prompts, then answers both through the cache: the first
goes to the completion API and is stored, the second is served from the
cache if it overlaps enough with the first.

Requires OPENAI_API_KEY. Set CACHE_BACKEND=memory to run without Redis.
"""

import asyncio
import logging

from lexical_cache.config import settings
from lexical_cache.evaluator import CacheEvaluator, QueryPair
from lexical_cache.repositories import (
    InMemoryCacheRepository,
    OpenAICompletionProvider,
    RedisCacheRepository,
)
from lexical_cache.services import CacheService
from lexical_cache.similarity import similarity_score, token_set


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


PROMPT_1 = "What are the benefits of regular exercise for cardiovascular health?"
PROMPT_2 = "How does regular exercise contribute to maintaining cardiovascular health?"


def demo_similarity() -> None:
    """Show how two prompts are tokenized and scored."""
    print_section("Similarity Score")

    print("Prompt 1", PROMPT_1)
    print("Prompt 2", PROMPT_2)
    print(f"\n  Tokens 1: {sorted(token_set(PROMPT_1))}")
    print(f"  Tokens 2: {sorted(token_set(PROMPT_2))}")
    print(f"\nSimilarity Score: {similarity_score(PROMPT_1, PROMPT_2):.4f}")
    print(f"Threshold:        {settings.cache_similarity_threshold}")


async def demo_cached_completion(api_key: str) -> None:
    """Answer both prompts through the cache."""
    print_section("Cached Completions")

    if settings.cache_backend == "memory":
        repository = InMemoryCacheRepository()
    else:
        repository = RedisCacheRepository.create()
    provider = OpenAICompletionProvider.create(api_key=api_key)
    cache = CacheService.create(repository=repository, completion_provider=provider)

    try:
        for label, prompt in (("PROMPT 1", PROMPT_1), ("PROMPT 2", PROMPT_2)):
            result = await cache.complete(prompt)
            source = "CACHE HIT" if result.cached else "API CALL"
            print(f"\nRESPONSE FOR {label} ({source})")
            if result.match is not None:
                print(f"  Matched: {result.match.prompt} (score {result.match.score:.4f})")
            print(f"  {result.response}")

        print(f"\nMetrics: {cache.metrics.to_dict()}")
    finally:
        await provider.close()
        await repository.close()


async def demo_threshold_sweep() -> None:
    """Tune the threshold on a few labelled pairs, fully offline."""
    print_section("Threshold Sweep")

    pairs = [
        QueryPair(PROMPT_2, PROMPT_1, should_match=True),
        QueryPair("What's the capital city of France?", "What is the capital of France?", True),
        QueryPair("How do I bake sourdough bread?", "What is the capital of France?", False),
        QueryPair("What is the capital of Japan?", "What is the capital of France?", False),
        QueryPair("Explain how vaccines work", "How do vaccines work?", True),
    ]
    evaluator = CacheEvaluator(CacheService(repository=InMemoryCacheRepository()))
    await evaluator.sweep_thresholds(pairs, min_threshold=0.1, max_threshold=0.7, steps=7)
    evaluator.print_summary()


async def main() -> None:
    # Fails before any request logic when OPENAI_API_KEY is missing.
    api_key = settings.require_openai_api_key()

    demo_similarity()
    await demo_threshold_sweep()
    await demo_cached_completion(api_key)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main())
