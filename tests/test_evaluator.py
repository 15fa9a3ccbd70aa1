"""
Tests for threshold evaluation.
"""

import asyncio

import pytest

from lexical_cache.evaluator import CacheEvaluator, EvalResult, QueryPair
from lexical_cache.repositories import InMemoryCacheRepository
from lexical_cache.services import CacheService

PAIRS = [
    # 5/8 overlap
    QueryPair("What's the capital city of France?", "What is the capital of France?", True),
    # 5/7 overlap: same template, different country
    QueryPair("What is the capital of Japan?", "What is the capital of France?", False),
    # no overlap
    QueryPair("How do I bake sourdough bread?", "What is the capital of France?", False),
]


@pytest.fixture
def evaluator():
    return CacheEvaluator(CacheService(repository=InMemoryCacheRepository()))


def test_evaluate_threshold_counts_outcomes(evaluator):
    result = asyncio.run(evaluator.evaluate_threshold(0.25, PAIRS))

    assert result.total_queries == 3
    assert result.true_positives == 1
    assert result.false_positives == 1
    assert result.true_negatives == 1
    assert result.false_negatives == 0
    assert result.precision == 0.5
    assert result.recall == 1.0


def test_evaluate_threshold_leaves_store_empty(evaluator):
    asyncio.run(evaluator.evaluate_threshold(0.25, PAIRS))

    assert asyncio.run(evaluator.cache.repository.count_all()) == 0


def test_sweep_and_optimal_threshold(evaluator):
    results = asyncio.run(evaluator.sweep_thresholds(PAIRS, 0.1, 0.7, steps=4))

    assert [round(r.threshold, 2) for r in results] == [0.1, 0.3, 0.5, 0.7]

    threshold, best = evaluator.find_optimal_threshold("f1_score")
    # At 0.7 the France paraphrase (0.625) misses while the Japan prompt (0.714) still hits.
    assert results[-1].f1_score == 0.0
    assert best.f1_score == pytest.approx(2 / 3)
    assert threshold == pytest.approx(0.1)


def test_find_optimal_threshold_requires_results(evaluator):
    with pytest.raises(ValueError):
        evaluator.find_optimal_threshold()


def test_eval_result_metrics_on_empty_run():
    result = EvalResult(threshold=0.25)

    assert result.hit_rate == 0.0
    assert result.precision == 0.0
    assert result.recall == 0.0
    assert result.f1_score == 0.0
