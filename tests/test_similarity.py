"""
Tests for tokenization and Jaccard scoring.
"""

import pytest

from lexical_cache.similarity import jaccard_index, similarity_score, token_set, tokenize

PROMPTS = [
    "",
    "!!!",
    "hello world",
    "Hello, World!",
    "What is the capital of France?",
    "What's the capital city of France?",
    "the the the",
    "café crème brûlée",
    "snake_case and 42 numbers",
]


def test_tokenize_splits_on_whitespace_and_punctuation():
    assert tokenize("Hello, world! How's it going?") == ["hello", "world", "how", "s", "it", "going"]


def test_tokenize_case_sensitive_keeps_casing():
    assert tokenize("Hello World", case_sensitive=True) == ["Hello", "World"]


def test_tokenize_keeps_digits_underscores_and_unicode_letters():
    assert tokenize("snake_case 42 Crème") == ["snake_case", "42", "crème"]


def test_tokenize_empty_and_punctuation_only():
    assert tokenize("") == []
    assert tokenize("?!... ---") == []


def test_token_set_collapses_duplicates():
    assert token_set("the The THE cat") == frozenset({"the", "cat"})


def test_jaccard_index():
    assert jaccard_index({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
    assert jaccard_index({"a"}, {"b"}) == 0.0


def test_jaccard_index_empty_union_is_zero():
    assert jaccard_index(set(), set()) == 0.0


@pytest.mark.parametrize("prompt", [p for p in PROMPTS if tokenize(p)])
def test_score_identical_prompt_is_one(prompt):
    assert similarity_score(prompt, prompt) == 1.0


def test_score_is_symmetric_and_bounded():
    for a in PROMPTS:
        for b in PROMPTS:
            score = similarity_score(a, b)
            assert score == similarity_score(b, a)
            assert 0.0 <= score <= 1.0


def test_score_empty_union_convention():
    assert similarity_score("", "") == 0
    assert similarity_score("!!!", "???") == 0


def test_score_ignores_order_and_repetition():
    assert similarity_score("world hello hello", "hello world") == 1.0


def test_score_case_folding():
    assert similarity_score("Hello World", "hello world") == 1.0
    assert similarity_score("Hello World", "hello world", case_sensitive=True) == 0.0


def test_score_apostrophe_scenario():
    # {what,is,the,capital,of,france} vs {what,s,the,capital,city,of,france}
    score = similarity_score("What is the capital of France?", "What's the capital city of France?")
    assert score == pytest.approx(5 / 8)


def test_score_unrelated_prompts():
    assert similarity_score("What is the capital of France?", "How do I bake bread?") == 0.0
