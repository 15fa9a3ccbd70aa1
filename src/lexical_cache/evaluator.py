"""
Evaluation utilities for the lexical cache.

This module provides tools for evaluating cache quality and tuning the
similarity threshold against labelled prompt pairs.
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from lexical_cache.services import CacheService

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """Result of a cache evaluation run."""

    threshold: float
    total_queries: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    true_positives: int = 0
    false_positives: int = 0
    true_negatives: int = 0
    false_negatives: int = 0
    avg_lookup_time_ms: float = 0.0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate."""
        if self.total_queries == 0:
            return 0.0
        return self.cache_hits / self.total_queries

    @property
    def precision(self) -> float:
        """Calculate precision (TP / (TP + FP))."""
        denominator = self.true_positives + self.false_positives
        if denominator == 0:
            return 0.0
        return self.true_positives / denominator

    @property
    def recall(self) -> float:
        """Calculate recall (TP / (TP + FN))."""
        denominator = self.true_positives + self.false_negatives
        if denominator == 0:
            return 0.0
        return self.true_positives / denominator

    @property
    def f1_score(self) -> float:
        """Calculate F1 score (2 * precision * recall / (precision + recall))."""
        p = self.precision
        r = self.recall
        if p + r == 0:
            return 0.0
        return 2 * p * r / (p + r)

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "threshold": self.threshold,
            "hit_rate": self.hit_rate,
            "precision": self.precision,
            "recall": self.recall,
            "f1_score": self.f1_score,
            "total_queries": self.total_queries,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "avg_lookup_time_ms": self.avg_lookup_time_ms,
        }


@dataclass
class QueryPair:
    """A pair of prompts with their expected match relationship."""

    query: str
    cached_query: str
    should_match: bool  # True if the cached answer is acceptable for query


class CacheEvaluator:
    """Evaluator for lexical cache quality.

    Each evaluation clears the service's store, so run it against a
    dedicated (usually in-memory) repository.
    """

    def __init__(self, cache: CacheService) -> None:
        """
        Initialize the evaluator.

        Args:
            cache: The CacheService instance to evaluate.
        """
        self.cache = cache
        self.results: list[EvalResult] = []

    async def evaluate_threshold(
        self,
        threshold: float,
        test_queries: list[QueryPair],
    ) -> EvalResult:
        """
        Evaluate cache behaviour at a specific threshold.

        Each pair is checked against a store holding only its own cached
        prompt, so the outcome does not depend on scan order.

        Args:
            threshold: The similarity threshold to test.
            test_queries: List of QueryPair objects to test.

        Returns:
            EvalResult with metrics for this threshold.
        """
        result = EvalResult(threshold=threshold)
        total_lookup_time = 0.0

        for pair in test_queries:
            await self.cache.clear()
            await self.cache.store(pair.cached_query, f"Response for: {pair.cached_query}")

            start_time = time.time()
            match = await self.cache.lookup(pair.query, threshold=threshold)
            total_lookup_time += (time.time() - start_time) * 1000

            result.total_queries += 1

            if match is not None:
                result.cache_hits += 1
                if pair.should_match:
                    result.true_positives += 1
                else:
                    result.false_positives += 1
            else:
                result.cache_misses += 1
                if pair.should_match:
                    result.false_negatives += 1
                else:
                    result.true_negatives += 1

        await self.cache.clear()

        if result.total_queries > 0:
            result.avg_lookup_time_ms = total_lookup_time / result.total_queries

        self.results.append(result)
        return result

    async def sweep_thresholds(
        self,
        test_queries: list[QueryPair],
        min_threshold: float = 0.05,
        max_threshold: float = 0.50,
        steps: int = 10,
    ) -> list[EvalResult]:
        """
        Sweep across multiple threshold values to find optimal.

        Args:
            test_queries: List of QueryPair objects to test.
            min_threshold: Minimum threshold to test.
            max_threshold: Maximum threshold to test.
            steps: Number of threshold steps to test.

        Returns:
            List of EvalResult for each threshold tested.
        """
        self.results = []

        for threshold in np.linspace(min_threshold, max_threshold, steps):
            result = await self.evaluate_threshold(float(threshold), test_queries)
            logger.info(
                "Threshold %.3f: hit rate %.2f%%, precision %.2f%%, F1 %.2f%%",
                result.threshold,
                result.hit_rate * 100,
                result.precision * 100,
                result.f1_score * 100,
            )

        return self.results

    def find_optimal_threshold(
        self,
        metric: str = "f1_score",
    ) -> tuple[float, EvalResult]:
        """
        Find the optimal threshold based on a metric.

        Args:
            metric: Metric to optimize ('f1_score', 'precision', 'recall', 'hit_rate').

        Returns:
            Tuple of (threshold, result) for the optimal threshold.
        """
        if not self.results:
            raise ValueError("No evaluation results available. Run sweep_thresholds first.")

        best_result = max(self.results, key=lambda r: getattr(r, metric))
        return best_result.threshold, best_result

    def print_summary(self) -> None:
        """Print a summary of all evaluation results."""
        if not self.results:
            print("No evaluation results available.")
            return

        print("\n" + "=" * 80)
        print("Cache Evaluation Summary")
        print("=" * 80)
        print(
            f"{'Threshold':<12} {'Hit Rate':<12} {'Precision':<12} {'Recall':<12} {'F1 Score':<12}"
        )
        print("-" * 80)

        for result in self.results:
            print(
                f"{result.threshold:<12.3f} "
                f"{result.hit_rate:<12.2%} "
                f"{result.precision:<12.2%} "
                f"{result.recall:<12.2%} "
                f"{result.f1_score:<12.2%}"
            )

        print("=" * 80)

        for metric in ["f1_score", "precision", "recall", "hit_rate"]:
            threshold, result = self.find_optimal_threshold(metric)
            print(f"Best {metric}: {threshold:.3f} ({getattr(result, metric):.2%})")
